"""relative_to_root(): link an absolute site path relative to a page URL."""

from __future__ import annotations

__all__ = ["relative_to_root"]


def relative_to_root(page_url: str, abs_path: str) -> str:
    """Return ``abs_path`` relative to the directory of ``page_url``.

    ``relative_to_root("/blog/post/", "/_xray")`` is ``"../../_xray"``;
    pages at the site root get a ``./`` prefix.

    Raises:
        ValueError: If either argument is not an absolute path.
    """
    if not page_url.startswith("/") or not abs_path.startswith("/"):
        msg = f"relative_to_root() requires two absolute paths, got {page_url!r} and {abs_path!r}"
        raise ValueError(msg)

    count = max(0, page_url.count("/") - 1)
    return ("../" * count or "./") + abs_path[1:]
