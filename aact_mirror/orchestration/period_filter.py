"""
Open-period exclusion.

The catalog lists the current month's archive while that month is still
accumulating. Such a row must never be persisted as if it were final, so
records dated in the current (year, month) are dropped before writing.
"""

from typing import Iterable, List

from aact_mirror.data.schemas import ArchiveRecord, DATE_FIELD, parse_archive_date


def is_open_period(record: ArchiveRecord, current_year: int, current_month: int) -> bool:
    """True when the record's date falls in the current month. Unparseable dates are never open."""
    parsed = parse_archive_date(record.get(DATE_FIELD))
    if parsed is None:
        return False
    return parsed.year == current_year and parsed.month == current_month


def filter_open_period(
    records: Iterable[ArchiveRecord],
    current_year: int,
    current_month: int,
) -> List[ArchiveRecord]:
    """
    Drop records belonging to the current, not-yet-closed month.

    Records without a parseable `date` pass through untouched. Order is kept.

    Args:
        records: Extracted records.
        current_year: Calendar year of "now" (from the injected clock).
        current_month: Calendar month 1-12 of "now".

    Returns:
        New list with open-period records removed.

    Example:
        >>> recs = [{"date": "06-01-2024", "url": "a"}, {"date": "05-31-2024", "url": "b"}]
        >>> filter_open_period(recs, 2024, 6)
        [{'date': '05-31-2024', 'url': 'b'}]
    """
    return [r for r in records if not is_open_period(r, current_year, current_month)]
