"""Human-readable build information: durations, sizes, benchmark and Git rows."""

from __future__ import annotations

from collections.abc import Mapping
from html import escape
from typing import Any, NamedTuple

__all__ = [
    "Measure",
    "format_bytes",
    "format_ms",
    "render_build_info",
    "render_git_info",
]


class Measure(NamedTuple):
    """A formatted number and its unit, e.g. ``Measure("1.50", "s")``."""

    value: str
    unit: str


def format_ms(ms: float) -> Measure:
    """Format a duration given in milliseconds."""
    if ms >= 1000:
        return Measure(f"{ms / 1000:.2f}", "s")
    if ms < 0.01:
        return Measure(f"{ms * 1000:.2f}", "μs")
    return Measure(f"{ms:.2f}", "ms")


def format_bytes(size: int) -> Measure:
    """Format a size given in bytes."""
    if size >= 1_000_000:
        return Measure(f"{size / 1_000_000:.2f}", "MB")
    if size >= 1000:
        return Measure(f"{size / 1000:.2f}", "KB")
    return Measure(str(size), "B")


def _row(term: str, definition: str) -> str:
    return f"<dt>{term}</dt><dd>{definition}</dd>"


def _number(measure: Measure) -> str:
    return f'<span class="number">{measure.value}</span>{measure.unit}'


def render_build_info(snapshot: Mapping[str, Any], url: str) -> str:
    """Return ``<dt>/<dd>`` rows with size and timings of the page at ``url``.

    Args:
        snapshot: A serialized snapshot (``XraySnapshot.to_serializable()``
            or the parsed ``xray-data.json``).
        url: The page URL as recorded in the snapshot.

    Returns:
        The rows, or ``""`` when the page has no benchmarks.
    """
    page = snapshot.get("pages", {}).get(url, {})
    bm = page.get("benchmarks")
    if not bm:
        return ""

    size = page.get("size", 0) - page.get("xraySize", 0)
    paginated = bm.get("paginated")

    rows = [
        _row("File size", f"{_number(format_bytes(size))} (excl. Xray)"),
        _row("Compile time", _number(format_ms(bm.get("compile", 0)))),
        _row(
            "Render time",
            _number(format_ms(bm.get("render", 0)))
            + (" (All paginated pages)" if paginated else ""),
        ),
    ]
    if paginated:
        plural = "s" if paginated > 1 else ""
        rows.append(
            _row(
                "RT per page",
                f"{_number(format_ms(bm.get('renderEach', 0)))} avg. "
                f'(<span class="number">{paginated}</span> page{plural})',
            )
        )
    return "".join(rows)


def render_git_info(git: Mapping[str, Any] | None) -> str:
    """Return the Git block: branch and short sha, ``-`` where unknown."""
    git = git or {}
    branch = git.get("branch")
    sha = git.get("sha")

    if branch:
        branch_html = f'<span class="string">{escape(branch)}</span>'
    else:
        branch_html = '<span class="undefined">-</span>'
    if sha:
        sha_html = f'<span class="string" title="{escape(sha)}">{escape(sha[:8])}</span>'
    else:
        sha_html = '<span class="undefined">-</span>'

    return (
        '<h3>Git</h3><dl id="git">'
        f"{_row('Branch', branch_html)}{_row('Revision', sha_html)}"
        "</dl>"
    )
