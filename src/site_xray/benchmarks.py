"""get_benchmarks(): per-page compile and render times from the host's timers.

The host aggregates timers under keys such as::

    > Compile > ./src/index.md
    > Render > ./src/index.md
    > Render > ./src/blog.md (12 pages)

The last form is used for paginated templates; its total covers every
generated page, so the per-page average is reported separately.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from site_xray.protocols import Benchmark

__all__ = ["Benchmarks", "get_benchmarks"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Benchmarks:
    """Timings of one template, in milliseconds.

    Attributes:
        compile: Total compile time.
        render: Total render time (of all pages, when paginated).
        paginated: Number of paginated pages, or None.
        render_each: Average render time per paginated page, or None.
    """

    compile: float = 0.0
    render: float = 0.0
    paginated: int | None = None
    render_each: float | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"render": self.render, "compile": self.compile}
        if self.paginated is not None:
            out["paginated"] = self.paginated
            out["renderEach"] = self.render_each
        return out


def get_benchmarks(
    input_path: str,
    group: Mapping[str, Benchmark] | None,
) -> Benchmarks:
    """Extract the benchmarks of ``input_path`` from an aggregate timer group.

    Args:
        input_path: Input path of the rendered template, exactly as the host
            uses it in its timer keys.
        group: The host's aggregate timer group, or None when the host does
            not benchmark.

    Returns:
        A Benchmarks instance; missing timers count as 0.
    """
    if group is None:
        return Benchmarks()

    compile_key = f"> Compile > {input_path}"
    render_key = f"> Render > {input_path}"

    compile_total = float(group[compile_key].total) if compile_key in group else 0.0
    render_total = float(group[render_key].total) if render_key in group else 0.0

    paginated_rgx = re.compile(rf"^{re.escape(render_key)} \(\d+ pages\)$")
    paginated_keys = [k for k in group if paginated_rgx.match(k)]
    logger.debug(
        "Paginated key for %s: %s",
        input_path,
        paginated_keys[0] if paginated_keys else "None",
    )

    if len(paginated_keys) == 1:
        timer = group[paginated_keys[0]]
        times_called = int(timer.times_called)
        total = float(timer.total)
        return Benchmarks(
            compile=compile_total,
            render=total,
            paginated=times_called,
            render_each=total / times_called if times_called else 0.0,
        )

    return Benchmarks(compile=compile_total, render=render_total)
