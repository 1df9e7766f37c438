"""
Tests for the sync planner.

The planner is a pure function, so these tests are plain input/output checks:
cold start, no gaps, gaps below the last local year, and the degenerate
horizon-before-origin case.
"""

import pytest

from aact_mirror.orchestration.sync_planner import FIRST_CATALOG_YEAR, plan_years_to_fetch


def test_origin_year_is_2017():
    assert FIRST_CATALOG_YEAR == 2017


@pytest.mark.parametrize("latest", [2017, 2018, 2021, 2024])
def test_cold_start_fetches_every_year_from_origin(latest):
    """Nothing on disk → every year origin..latest."""
    assert plan_years_to_fetch(set(), latest) == list(range(2017, latest + 1))


def test_no_gaps_refreshes_last_existing_year_onward():
    """All years present up to the last local one → refresh from that year."""
    assert plan_years_to_fetch({2017, 2018, 2019}, 2021) == [2019, 2020, 2021]


def test_no_gaps_and_up_to_date_refreshes_only_latest_year():
    existing = set(range(2017, 2025))
    assert plan_years_to_fetch(existing, 2024) == [2024]


def test_gap_below_last_existing_year_starts_at_gap():
    """2018 missing → start at 2018 and run through latest."""
    assert plan_years_to_fetch({2017, 2019}, 2020) == [2018, 2019, 2020]


def test_gap_refetches_complete_years_between_gap_and_last_existing():
    """
    Years between the first gap and the last local year are fetched again
    even though they exist (single contiguous range).
    """
    plan = plan_years_to_fetch({2017, 2019, 2020, 2021}, 2022)
    assert plan == [2018, 2019, 2020, 2021, 2022]


def test_missing_origin_year_starts_at_origin():
    assert plan_years_to_fetch({2019, 2020}, 2020) == [2017, 2018, 2019, 2020]


def test_only_newer_years_missing_starts_at_last_existing():
    """Missing years all above max(existing) → start at max(existing)."""
    assert plan_years_to_fetch({2017, 2018}, 2020) == [2018, 2019, 2020]


def test_plan_covers_every_missing_year_and_ends_at_latest():
    existing = {2017, 2020, 2022}
    latest = 2024
    plan = plan_years_to_fetch(existing, latest)

    missing = set(range(2017, latest + 1)) - existing
    assert missing <= set(plan)
    assert plan[0] == min(min(missing), max(existing))
    assert plan[-1] == latest
    assert plan == sorted(plan)


def test_existing_years_outside_catalog_range_are_tolerated():
    """A stray file for a year beyond the horizon does not break planning."""
    assert plan_years_to_fetch({2017, 2018, 2030}, 2019) == [2019]


def test_latest_before_origin_yields_empty_plan():
    assert plan_years_to_fetch(set(), 2016) == []


def test_custom_origin_year():
    assert plan_years_to_fetch(set(), 2022, origin_year=2020) == [2020, 2021, 2022]


def test_planner_is_pure():
    """Same inputs give the same plan; the input set is not mutated."""
    existing = {2017, 2019}
    first = plan_years_to_fetch(existing, 2020)
    second = plan_years_to_fetch(existing, 2020)

    assert first == second
    assert existing == {2017, 2019}


def test_accepts_any_iterable_of_years():
    assert plan_years_to_fetch([2019, 2017, 2018], 2020) == [2019, 2020]
