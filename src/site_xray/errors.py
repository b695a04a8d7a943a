"""Exception hierarchy for site-xray.

Data-shape problems (cycles, unknown values, excessive depth) are never
errors: they degrade to ``circular`` / ``unknown`` descriptors or silent
truncation.  Only contract violations and I/O failures on the build side
raise.
"""

from __future__ import annotations

__all__ = [
    "ParserStateError",
    "SnapshotWriteError",
    "UnknownDataTypeError",
    "XrayError",
]


class XrayError(Exception):
    """Base class for every error raised by site-xray."""


class ParserStateError(XrayError, RuntimeError):
    """A parse pass was started before the global-key set was pushed."""


class UnknownDataTypeError(XrayError, ValueError):
    """The renderer met a descriptor whose type is outside the closed tag set."""


class SnapshotWriteError(XrayError, OSError):
    """The per-build snapshot could not be written to the output directory."""
