"""
Which years of monthly metadata to (re)fetch.

**Conceptual**: Given the years already mirrored on disk and the latest year
the catalog publishes, produce the ascending list of years to fetch. Older
years that are present are treated as final; only the most recent local year
can still be picking up late entries, so it is always refreshed.

**Rules** (origin = FIRST_CATALOG_YEAR = 2017, the first year the catalog lists):
  - Nothing on disk: every year origin..latest (cold start).
  - Nothing missing in origin..latest: max(existing)..latest.
  - Something missing: min(first missing, max(existing))..latest.

The last rule is a single contiguous range. When a gap sits below the most
recent local year, the years between the gap and that year are fetched again
even though they are complete. Files are overwritten, so the refetch is
harmless.

Example:
    existing {2017, 2019}, latest 2020:
      missing = {2018}
      start = min(2018, 2019) = 2018
      → [2018, 2019, 2020]
"""

from typing import Iterable, List

FIRST_CATALOG_YEAR = 2017


def plan_years_to_fetch(
    existing_years: Iterable[int],
    latest_year: int,
    origin_year: int = FIRST_CATALOG_YEAR,
) -> List[int]:
    """
    Compute the ascending list of years to fetch.

    Pure function: no I/O, same inputs → same output.

    Args:
        existing_years: Years that already have a YearFile (any iterable; not mutated).
        latest_year: Horizon year from the catalog's year navigation.
        origin_year: First year the catalog publishes (default 2017).

    Returns:
        Ascending list of years. Empty only when latest_year < origin_year.

    Example:
        >>> plan_years_to_fetch(set(), 2019)
        [2017, 2018, 2019]
        >>> plan_years_to_fetch({2017, 2018, 2019}, 2021)
        [2019, 2020, 2021]
        >>> plan_years_to_fetch({2017, 2019}, 2020)
        [2018, 2019, 2020]
    """
    existing = set(existing_years)
    all_years = range(origin_year, latest_year + 1)

    if not existing:
        return list(all_years)

    missing = set(all_years) - existing
    last_existing = max(existing)

    if not missing:
        start = last_existing
    else:
        start = min(min(missing), last_existing)

    return list(range(start, latest_year + 1))
