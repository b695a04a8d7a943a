"""XraySnapshot: the consolidated per-build data written to ``xray-data.json``.

Serialized shape::

    {
        "timestamp": 1718000000000,
        "pages": {"/about/": {"size": 5120, "xraySize": 2048, "benchmarks": {...}}},
        "globalData": {...Descriptor...},
        "git": {"sha": "...", "branch": "main"}
    }

``globalData`` and ``git`` are omitted until they are set.  The browser
compares ``timestamp`` with ``xray-timestamp.json`` to decide whether its
cached copy is stale.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any

from site_xray.git import GitInfo
from site_xray.tree.nodes import Descriptor

__all__ = ["XraySnapshot"]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass
class XraySnapshot:
    """Build-wide data bag with explicit accessors.

    Attributes:
        timestamp:   Creation time in integer milliseconds.
        pages:       Per-URL fields (``size``, ``xraySize``, ``benchmarks``).
        global_data: Descriptor tree of the global data, once parsed.
        git:         Revision of the site sources, once fetched.
    """

    timestamp: int = field(default_factory=_now_ms)
    pages: dict[str, dict[str, Any]] = field(default_factory=dict)
    global_data: Descriptor | None = None
    git: GitInfo | None = None

    def touch(self) -> None:
        """Renew the timestamp so clients drop their cached copy."""
        self.timestamp = _now_ms()

    def set_page_field(self, url: str, key: str, value: Any) -> XraySnapshot:
        """Set one field for the page at ``url``; returns self for chaining."""
        self.pages.setdefault(url, {})[key] = value
        return self

    def page(self, url: str) -> dict[str, Any]:
        """Return the fields recorded for ``url`` (empty if none)."""
        return self.pages.get(url, {})

    def to_serializable(self) -> dict[str, Any]:
        """Return a JSON-ready plain structure."""
        pages: dict[str, dict[str, Any]] = {}
        for url, fields in self.pages.items():
            pages[url] = {
                name: value.to_dict() if hasattr(value, "to_dict") else value
                for name, value in fields.items()
            }

        out: dict[str, Any] = {"timestamp": self.timestamp, "pages": pages}
        if self.global_data is not None:
            out["globalData"] = self.global_data.to_dict()
        if self.git is not None:
            out["git"] = self.git.to_dict()
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_serializable(), ensure_ascii=False, separators=(",", ":"))

    def timestamp_json(self) -> str:
        """Return the body of ``xray-timestamp.json``."""
        return json.dumps({"timestamp": self.timestamp})
