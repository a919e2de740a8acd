"""Schedulers for the reshuffle pacing delay."""

from typing import Callable

# (delay_seconds, callback) -> None. The callback must eventually run exactly once.
Scheduler = Callable[[float, Callable[[], None]], None]


def immediate_scheduler(delay: float, callback: Callable[[], None]) -> None:
    """Run the callback right away, skipping the pacing delay."""
    callback()
