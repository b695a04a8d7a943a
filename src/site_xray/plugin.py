"""XrayPlugin: wires DataParser, render() and XraySnapshot into a build.

Lifecycle, as driven by the host site generator:

1. ``before_build()`` once per build run resets identity state.
2. ``await shortcode(context, page, global_keys)`` once per page that
   embeds the inspector.  The first call of a build parses the global
   data into the snapshot; every call parses and renders the page data.
3. ``after_build(results, output_dir=...)`` once per build run records
   sizes, benchmarks and Git info, then writes ``xray-data.json`` and
   ``xray-timestamp.json`` (file mode) or keeps them for ``routes()``
   (serve mode).

The plugin disables itself (every shortcode returns ``""``) when
``only_env`` does not match the environment, or when ``mode`` is
``serve`` but the host is building or watching.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from site_xray.benchmarks import get_benchmarks
from site_xray.config import RunMode, XrayMode, XrayOptions
from site_xray.errors import SnapshotWriteError
from site_xray.git import get_git_info
from site_xray.overlay import render_overlay
from site_xray.protocols import Benchmark
from site_xray.snapshot import XraySnapshot
from site_xray.tree.parser import DataParser
from site_xray.tree.renderer import render

__all__ = ["BuildResult", "PageInfo", "Response", "XrayPlugin"]

logger = logging.getLogger(__name__)

DATA_FILE = "xray-data.json"
TIMESTAMP_FILE = "xray-timestamp.json"


@dataclass(frozen=True, slots=True)
class PageInfo:
    """The page currently being rendered."""

    url: str
    input_path: str


@dataclass(frozen=True, slots=True)
class BuildResult:
    """One written page as reported by the host after the build."""

    url: str
    content: str
    input_path: str = ""


@dataclass(frozen=True, slots=True)
class Response:
    """A dev-server response for a virtual route."""

    body: str
    status: int = 200
    headers: dict[str, str] = field(
        default_factory=lambda: {"Content-Type": "application/json"}
    )


class XrayPlugin:
    """Debugging overlay for one site-generator process.

    Args:
        options: Plugin options.  Defaults to ``XrayOptions()``.
        run_mode: The host's run mode, or None when unknown.
        environ: Environment used for the ``only_env`` check.  Defaults to
            ``os.environ``.
        host_name: Display name of the site generator in the overlay.
        host_version: Version of the site generator in the overlay.
    """

    def __init__(
        self,
        options: XrayOptions | None = None,
        run_mode: RunMode | str | None = None,
        environ: Mapping[str, str] | None = None,
        *,
        host_name: str = "Generator",
        host_version: str = "",
    ) -> None:
        self.options: XrayOptions = options if options is not None else XrayOptions()
        self.run_mode: RunMode | None = RunMode(run_mode) if run_mode is not None else None
        self._environ: Mapping[str, str] = environ if environ is not None else os.environ
        self.host_name = host_name
        self.host_version = host_version

        self.parser = DataParser(self.options.parser_config())
        self.snapshot = XraySnapshot()

        self.disabled_reason: str | None = self._check_disabled()
        if self.disabled_reason is not None and not self.options.quiet:
            logger.warning("%s", self.disabled_reason)
        logger.debug("Options: %s", self.options)

    # ------------------------------------------------------------------
    # Mode resolution
    # ------------------------------------------------------------------

    def _check_disabled(self) -> str | None:
        opts = self.options
        if opts.only_env is not None:
            actual = self._environ.get(opts.only_env_name)
            if actual != opts.only_env:
                return (
                    f"onlyEnv condition not met ({actual} != {opts.only_env}). "
                    "Xray disabled."
                )
        if self.run_mode in (RunMode.BUILD, RunMode.WATCH) and opts.mode == XrayMode.SERVE:
            return (
                f"Run mode is '{self.run_mode}' but Xray mode is 'serve'. "
                "Xray disabled."
            )
        return None

    @property
    def enabled(self) -> bool:
        return self.disabled_reason is None

    @property
    def serves_virtually(self) -> bool:
        """True when the snapshot is served from ``routes()``."""
        return (
            self.enabled
            and self.run_mode == RunMode.SERVE
            and self.options.mode in (XrayMode.SERVE, XrayMode.AUTO)
        )

    @property
    def writes_files(self) -> bool:
        """True when ``after_build()`` writes the snapshot to disk."""
        if not self.enabled or self.serves_virtually:
            return False
        return self.options.mode == XrayMode.BUILD or (
            self.run_mode == RunMode.BUILD and self.options.mode == XrayMode.AUTO
        )

    @property
    def data_url(self) -> str:
        return f"/{self.options.dir}/{DATA_FILE}"

    @property
    def timestamp_url(self) -> str:
        return f"/{self.options.dir}/{TIMESTAMP_FILE}"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def before_build(self) -> None:
        """Reset the parser; called once at the start of every build run."""
        logger.debug("before_build")
        self.parser.reset()
        self.snapshot.touch()

    async def shortcode(
        self,
        context: Mapping[str, Any],
        page: PageInfo,
        global_keys: Iterable[str],
    ) -> str:
        """Return the overlay markup for ``page``.

        Args:
            context: The page's full template context.
            page: URL and input path of the page.
            global_keys: Top-level context keys that hold global data.  Only
                used by the first call of a build.

        Returns:
            The overlay HTML, or ``""`` when the plugin is disabled.
        """
        if not self.enabled:
            return ""

        if not self.parser.has_global():
            keys = list(global_keys)
            collections_key = self.options.collections_key
            if collections_key is not None and collections_key not in keys:
                keys.append(collections_key)
            logger.debug("%s global keys %s", page.url, keys)
            self.parser.set_global_keys(keys)
            logger.debug("%s parsing global data", page.url)
            self.snapshot.global_data = await self.parser.parse_global_data(context)

        page_data = await self.parser.parse_page_data(context)
        page_html = render(page_data) if page_data is not None else ""

        html = render_overlay(
            page.url,
            page.input_path,
            page_html,
            self.options,
            host_name=self.host_name,
            host_version=self.host_version,
            run_mode=self.run_mode,
        )

        # Subtracted from the page size in the build information.
        self.snapshot.set_page_field(page.url, "xraySize", len(html.encode("utf-8")))
        return html

    def after_build(
        self,
        results: Iterable[BuildResult],
        *,
        output_dir: str | Path,
        input_dir: str | Path | None = None,
        benchmarks: Mapping[str, Benchmark] | None = None,
    ) -> None:
        """Record per-page metadata and write the snapshot.

        Args:
            results: Every page written by the build.
            output_dir: The site's output directory.
            input_dir: The site's input directory, used for Git info.
                Defaults to the current working directory.
            benchmarks: The host's aggregate benchmark group, if any.

        Raises:
            SnapshotWriteError: If the snapshot could not be written.
        """
        if not self.enabled:
            return
        logger.debug("after_build")

        if self.options.git:
            self.snapshot.git = get_git_info(input_dir if input_dir is not None else Path.cwd())

        for result in results:
            self.snapshot.set_page_field(result.url, "size", len(result.content.encode("utf-8")))
            if self.options.benchmarks:
                self.snapshot.set_page_field(
                    result.url, "benchmarks", get_benchmarks(result.input_path, benchmarks)
                )

        if self.writes_files:
            self.write_snapshot(output_dir)

    def write_snapshot(self, output_dir: str | Path) -> Path:
        """Write ``xray-data.json`` and ``xray-timestamp.json``.

        Returns:
            The path of the data file.

        Raises:
            SnapshotWriteError: Wrapping the underlying OSError.
        """
        target = Path(output_dir) / self.options.dir
        data_file = target / DATA_FILE
        logger.debug("Writing data file to %s", data_file)
        try:
            target.mkdir(parents=True, exist_ok=True)
            data_file.write_text(self.snapshot.to_json(), encoding="utf-8")
            (target / TIMESTAMP_FILE).write_text(self.snapshot.timestamp_json(), encoding="utf-8")
        except OSError as exc:
            msg = f"Error while writing data file: {exc}"
            raise SnapshotWriteError(msg) from exc
        return data_file

    # ------------------------------------------------------------------
    # Dev server
    # ------------------------------------------------------------------

    def routes(self) -> dict[str, Callable[[], Response]]:
        """Return the virtual routes serving the snapshot (serve mode only)."""
        if not self.serves_virtually:
            return {}
        return {
            self.timestamp_url: lambda: Response(self.snapshot.timestamp_json()),
            self.data_url: lambda: Response(self.snapshot.to_json()),
        }
