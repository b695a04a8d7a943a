"""site-xray - inspect the template data of a static site from inside its pages."""

from __future__ import annotations

import logging

from site_xray._version import __version__
from site_xray.benchmarks import Benchmarks, get_benchmarks
from site_xray.config import LogLevel, ParserConfig, RunMode, XrayMode, XrayOptions
from site_xray.errors import (
    ParserStateError,
    SnapshotWriteError,
    UnknownDataTypeError,
    XrayError,
)
from site_xray.git import GitInfo, get_git_info
from site_xray.plugin import BuildResult, PageInfo, Response, XrayPlugin
from site_xray.snapshot import XraySnapshot
from site_xray.tree import UNDEFINED, DataParser, DataType, Descriptor, classify, render

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__: list[str] = [
    "UNDEFINED",
    "Benchmarks",
    "BuildResult",
    "DataParser",
    "DataType",
    "Descriptor",
    "GitInfo",
    "LogLevel",
    "PageInfo",
    "ParserConfig",
    "ParserStateError",
    "Response",
    "RunMode",
    "SnapshotWriteError",
    "UnknownDataTypeError",
    "XrayError",
    "XrayMode",
    "XrayOptions",
    "XrayPlugin",
    "XraySnapshot",
    "__version__",
    "classify",
    "get_benchmarks",
    "get_git_info",
    "render",
]
