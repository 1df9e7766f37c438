"""
Clock abstractions for deterministic period filtering.

The only place the sync needs "now" is to decide which calendar month is still
open (and so must not be persisted). Reading it through a Clock object instead
of calling date.today() inside the filter keeps that decision reproducible in
tests: freeze the clock in June 2024 and the June 2024 rows disappear, every
time, on every machine.
"""

from datetime import datetime
from typing import Protocol, Tuple


class Clock(Protocol):
    """
    Abstract time source protocol.

    **Conceptual**: A Clock is any object that can answer "what time is it
    right now?". The orchestrator asks its clock once per archive type and
    hands the resulting (year, month) to the period filter.

    **Example**:
        def sync(clock: Clock):
            year, month = current_period(clock)

        sync(RealClock())                                            # production
        sync(FrozenClock(datetime(2024, 6, 15, tzinfo=timezone.utc)))  # tests
    """

    def now(self) -> datetime:
        """Return the current time according to this clock."""
        ...


class RealClock:
    """
    Clock that returns the actual current system time in the local time zone.

    The open month is the operator's calendar month, so near a month boundary
    this can differ from the UTC month.
    """

    def now(self) -> datetime:
        return datetime.now().astimezone()


class FrozenClock:
    """
    Clock that always returns a fixed timestamp.

    **Usage**:
        clock = FrozenClock(datetime(2024, 6, 15, tzinfo=timezone.utc))
        current_period(clock)  # (2024, 6), always
    """

    def __init__(self, fixed_now: datetime):
        """
        Args:
            fixed_now: The datetime to return on every call to now().
        """
        self._fixed_now = fixed_now

    def now(self) -> datetime:
        return self._fixed_now


def current_period(clock: Clock) -> Tuple[int, int]:
    """
    Return the open reporting period as (year, month).

    Args:
        clock: Time source.

    Returns:
        Tuple of (calendar year, calendar month 1-12) for clock.now().
    """
    now = clock.now()
    return now.year, now.month

