"""Structural protocols for the objects the host hands to site-xray.

Hosts do not inherit from anything: any object with the right attributes
passes ``isinstance`` checks.

Example::

    from site_xray.protocols import Benchmark

    class Timer:
        total = 12.5
        times_called = 1

    assert isinstance(Timer(), Benchmark)  # True
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

__all__ = ["Benchmark"]


@runtime_checkable
class Benchmark(Protocol):
    """One aggregated timer of the host's benchmark manager.

    - ``total``: accumulated wall-clock time in milliseconds.
    - ``times_called``: how often the timed section ran.
    """

    total: float
    times_called: int
