"""
Tests for the daily snapshot download action.

**Testing philosophy**: The selection helpers are tested directly. main() is
exercised with the client and provider patched out, so no HTTP is made.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

# Add project root to path so we can import actions module
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from actions.download_latest_daily_snapshot import (
    main,
    select_latest_daily_archive,
    snapshot_file_name,
)
from aact_mirror.config.settings import CatalogSettings, PathSettings, Settings
from aact_mirror.venues.catalog_client import CatalogServerError


DAILY = [
    {"date": "06-09-2024", "file": "20240609_clinical_trials.zip", "url": "https://cdn.test/20240609.zip"},
    {"date": "06-11-2024", "file": "20240611_clinical_trials.zip", "url": "https://cdn.test/20240611.zip"},
    {"date": "06-10-2024", "file": "20240610_clinical_trials.zip", "url": "https://cdn.test/20240610.zip"},
]


# ============================================================================
# Selection helpers
# ============================================================================

def test_select_latest_by_date_not_position():
    assert select_latest_daily_archive(DAILY)["date"] == "06-11-2024"


def test_select_ignores_undated_and_unlinked_rows():
    records = [
        {"date": "", "url": "https://cdn.test/a.zip"},
        {"date": "12-31-2030", "url": ""},
        {"date": "01-02-2024", "url": "https://cdn.test/b.zip"},
    ]
    assert select_latest_daily_archive(records)["url"] == "https://cdn.test/b.zip"


def test_select_last_listed_wins_ties():
    records = [
        {"date": "01-02-2024", "url": "first"},
        {"date": "01-02-2024", "url": "second"},
    ]
    assert select_latest_daily_archive(records)["url"] == "second"


def test_select_without_candidates():
    assert select_latest_daily_archive([]) is None
    assert select_latest_daily_archive([{"date": "soon", "url": "x"}]) is None


def test_file_name_prefers_file_column():
    assert snapshot_file_name(DAILY[0]) == "20240609_clinical_trials.zip"


def test_file_name_falls_back_to_url():
    record = {"date": "06-09-2024", "url": "https://cdn.test/static/20240609.zip?sig=abc"}
    assert snapshot_file_name(record) == "20240609.zip"


def test_file_name_without_any_source():
    with pytest.raises(ValueError, match="Cannot derive a file name"):
        snapshot_file_name({"url": "https://cdn.test/"})


# ============================================================================
# main()
# ============================================================================

@pytest.fixture
def settings(tmp_path):
    return Settings(
        catalog=CatalogSettings(base_url="https://aact.test"),
        paths=PathSettings(download_dir=tmp_path / "download"),
    )


def run_main(settings, daily_records, download_side_effect=None, argv=None):
    client = MagicMock()
    client.__enter__.return_value = client
    client.__exit__.return_value = False
    client.download_file.side_effect = download_side_effect
    provider = MagicMock()
    provider.get_daily_archives.return_value = daily_records

    with patch("actions.download_latest_daily_snapshot.get_settings", return_value=settings), \
            patch("actions.download_latest_daily_snapshot.CatalogClient", return_value=client), \
            patch("actions.download_latest_daily_snapshot.CatalogDataProvider", return_value=provider):
        with pytest.raises(SystemExit) as exc_info:
            main(argv or [])

    return exc_info.value.code, client, provider


def test_main_downloads_newest_snapshot(settings, tmp_path):
    code, client, provider = run_main(settings, DAILY)

    assert code == 0
    provider.get_daily_archives.assert_called_once()
    assert provider.get_daily_archives.call_args.kwargs["page"] == 1
    client.download_file.assert_called_once_with(
        "https://cdn.test/20240611.zip",
        tmp_path / "download" / "20240611_clinical_trials.zip",
    )


def test_main_output_dir_override(settings, tmp_path):
    code, client, _ = run_main(settings, DAILY, argv=["--output-dir", str(tmp_path / "elsewhere")])

    assert code == 0
    assert client.download_file.call_args.args[1].parent == tmp_path / "elsewhere"


def test_main_without_snapshots_exits_1(settings):
    code, client, _ = run_main(settings, [])

    assert code == 1
    client.download_file.assert_not_called()


def test_main_download_failure_exits_2(settings):
    code, _, _ = run_main(settings, DAILY, download_side_effect=CatalogServerError("boom"))

    assert code == 2
