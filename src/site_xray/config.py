"""ParserConfig and XrayOptions: configuration for parsing and the plugin.

ParserConfig is a frozen (immutable) dataclass holding the traversal
budgets.  XrayOptions holds everything the host can pass to the plugin;
it derives its own ParserConfig so both layers always agree.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import StrEnum, auto
from typing import Any

__all__ = ["LogLevel", "ParserConfig", "RunMode", "XrayMode", "XrayOptions"]


class XrayMode(StrEnum):
    """How the snapshot and assets reach the browser.

    - AUTO:  Follow the host's run mode (serve -> virtual, build -> files).
    - BUILD: Always write files to the output directory.
    - SERVE: Only serve virtually; disabled for build and watch runs.
    """

    AUTO = auto()
    BUILD = auto()
    SERVE = auto()


class RunMode(StrEnum):
    """The host's run mode for the current process."""

    BUILD = auto()
    WATCH = auto()
    SERVE = auto()


class LogLevel(StrEnum):
    """Browser-side log level written into the overlay's ``data-loglevel``."""

    NONE = auto()
    ERROR = auto()
    WARN = auto()
    INFO = auto()
    DEBUG = auto()


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Immutable configuration for the data parser.

    Attributes:
        max_depth: Nesting level at which traversal stops (>= 0).  Values
            at this depth are omitted, not represented by a placeholder.
        cutoff: Maximum length of scalar content before it is truncated
            and an ellipsis appended (>= 0).
        collections_key: Key whose members are summarized instead of
            expanded.  ``None`` disables the special case.
    """

    max_depth: int = 8
    cutoff: int = 45
    collections_key: str | None = "collections"

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            msg = f"max_depth must be an int, got {self.max_depth!r}"
            raise ValueError(msg)
        if self.max_depth < 0:
            msg = f"max_depth must be >= 0, got {self.max_depth}"
            raise ValueError(msg)
        if isinstance(self.cutoff, bool) or not isinstance(self.cutoff, int):
            msg = f"cutoff must be an int, got {self.cutoff!r}"
            raise ValueError(msg)
        if self.cutoff < 0:
            msg = f"cutoff must be >= 0, got {self.cutoff}"
            raise ValueError(msg)


# Host option names (camelCase) -> XrayOptions field names.
_OPTION_ALIASES: dict[str, str] = {
    "logLevel": "log_level",
    "maxDepth": "max_depth",
    "onlyEnv": "only_env",
    "onlyEnvName": "only_env_name",
    "collectionsKey": "collections_key",
}


@dataclass(frozen=True, slots=True)
class XrayOptions:
    """Immutable plugin options.

    Attributes:
        benchmarks: Record compile/render benchmarks per page.
        cutoff: See ``ParserConfig.cutoff``.
        dir: Output directory (relative to the site root) for the snapshot.
        git: Record the sha and branch of the input directory.
        log_level: Browser-side log level.
        max_depth: See ``ParserConfig.max_depth``.
        mode: See ``XrayMode``.
        only_env: When set, the plugin is only active if the environment
            variable ``only_env_name`` holds exactly this value.
        only_env_name: Name of the environment variable checked by
            ``only_env``.
        quiet: Suppress the warning logged when the plugin disables itself.
        collections_key: See ``ParserConfig.collections_key``.
    """

    benchmarks: bool = True
    cutoff: int = 45
    dir: str = "_xray"
    git: bool = True
    log_level: LogLevel = LogLevel.WARN
    max_depth: int = 8
    mode: XrayMode = XrayMode.AUTO
    only_env: str | None = None
    only_env_name: str = "SITE_ENV"
    quiet: bool = False
    collections_key: str | None = "collections"

    def __post_init__(self) -> None:
        # Accept plain strings for the enum fields.
        object.__setattr__(self, "log_level", LogLevel(self.log_level))
        object.__setattr__(self, "mode", XrayMode(self.mode))
        if not self.dir or self.dir.strip("/") == "":
            msg = f"dir must name a directory, got {self.dir!r}"
            raise ValueError(msg)
        object.__setattr__(self, "dir", self.dir.strip("/"))
        # Validates the numeric budgets.
        self.parser_config()

    def parser_config(self) -> ParserConfig:
        """Return the ParserConfig matching these options."""
        return ParserConfig(
            max_depth=self.max_depth,
            cutoff=self.cutoff,
            collections_key=self.collections_key,
        )

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> XrayOptions:
        """Build options from a host-style mapping.

        Both snake_case field names and the camelCase names used by host
        configuration files are accepted.

        Raises:
            ValueError: On an unknown option name or an invalid value.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for name, value in options.items():
            field_name = _OPTION_ALIASES.get(name, name)
            if field_name not in known:
                msg = f"Unknown xray option: {name!r}"
                raise ValueError(msg)
            kwargs[field_name] = value
        return cls(**kwargs)
