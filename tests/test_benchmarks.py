"""Tests for get_benchmarks()."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from site_xray.benchmarks import Benchmarks, get_benchmarks
from site_xray.protocols import Benchmark


@dataclass
class Timer:
    total: float
    times_called: int = 1


class TestBenchmarkProtocol:
    def test_timer_satisfies_protocol(self) -> None:
        assert isinstance(Timer(1.0), Benchmark)


class TestGetBenchmarks:
    def test_no_group_gives_zeros(self) -> None:
        assert get_benchmarks("./src/index.md", None) == Benchmarks(compile=0.0, render=0.0)

    def test_plain_template(self) -> None:
        group = {
            "> Compile > ./src/index.md": Timer(12.5),
            "> Render > ./src/index.md": Timer(3.25),
            "> Render > ./src/other.md": Timer(99.0),
        }
        result = get_benchmarks("./src/index.md", group)
        assert result == Benchmarks(compile=12.5, render=3.25)
        assert result.paginated is None

    def test_missing_timers_count_as_zero(self) -> None:
        group = {"> Compile > ./src/index.md": Timer(4.0)}
        assert get_benchmarks("./src/index.md", group) == Benchmarks(compile=4.0, render=0.0)

    def test_paginated_template(self) -> None:
        group = {
            "> Compile > ./src/blog.md": Timer(2.0),
            "> Render > ./src/blog.md (3 pages)": Timer(30.0, times_called=3),
        }
        result = get_benchmarks("./src/blog.md", group)
        assert result.compile == 2.0
        assert result.render == 30.0
        assert result.paginated == 3
        assert result.render_each == pytest.approx(10.0)

    def test_ambiguous_pagination_is_ignored(self) -> None:
        group = {
            "> Render > ./src/blog.md": Timer(5.0),
            "> Render > ./src/blog.md (3 pages)": Timer(30.0, 3),
            "> Render > ./src/blog.md (4 pages)": Timer(40.0, 4),
        }
        result = get_benchmarks("./src/blog.md", group)
        assert result == Benchmarks(compile=0.0, render=5.0)

    def test_path_is_matched_literally(self) -> None:
        group = {"> Render > ./src/blogXmd (2 pages)": Timer(8.0, 2)}
        assert get_benchmarks("./src/blog.md", group).paginated is None


class TestToDict:
    def test_plain(self) -> None:
        assert Benchmarks(compile=1.0, render=2.0).to_dict() == {"render": 2.0, "compile": 1.0}

    def test_paginated(self) -> None:
        data = Benchmarks(compile=1.0, render=9.0, paginated=3, render_each=3.0).to_dict()
        assert data == {"render": 9.0, "compile": 1.0, "paginated": 3, "renderEach": 3.0}
