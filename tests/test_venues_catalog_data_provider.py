"""
Tests for CatalogDataProvider.

**Testing philosophy**: The page fetcher is a Mock returning canned
BeautifulSoup pages, so these tests cover which page is requested for which
call and which section is read, not HTTP.
"""

from unittest.mock import Mock

import pytest
from bs4 import BeautifulSoup

from aact_mirror.config.settings import CatalogSettings
from aact_mirror.data.schemas import ArchiveType
from aact_mirror.venues.catalog_client import CatalogClient, CatalogServerError
from aact_mirror.venues.catalog_data_provider import CatalogDataProvider
from aact_mirror.venues.catalog_parser import CatalogStructureWarning, StructuralMismatchError


LISTING_HTML = """
<html><body>
  <div class="year-navigation"><a>2022</a><a>2023</a><a>Next</a></div>
  <div class="snapshots-section">
    <h3>Recent Daily Snapshots</h3>
    <div class="snapshots-grid-table">
      <div class="snapshots-grid-row snapshots-grid-header"><div>Date</div></div>
      <div class="snapshots-grid-row">
        <div data-label="Date:">06-10-2023</div>
        <div data-label="File"><a href="/daily/20230610.zip">20230610.zip</a></div>
      </div>
    </div>
  </div>
  <div class="snapshots-section">
    <h3>Monthly Archives</h3>
    <div class="snapshots-grid-table">
      <div class="snapshots-grid-row snapshots-grid-header"><div>Date</div></div>
      <div class="snapshots-grid-row">
        <div data-label="Date:">05-01-2023</div>
        <div data-label="File"><a href="/monthly/20230501.zip">20230501.zip</a></div>
      </div>
      <div class="snapshots-grid-row">
        <div data-label="Date:">04-01-2023</div>
        <div data-label="File"><a href="/monthly/20230401.zip">20230401.zip</a></div>
      </div>
    </div>
  </div>
</body></html>
"""


@pytest.fixture
def mock_fetcher():
    fetcher = Mock()
    fetcher.fetch_snapshots_page.return_value = BeautifulSoup(LISTING_HTML, "html.parser")
    return fetcher


def test_get_latest_year_reads_landing_page(mock_fetcher):
    provider = CatalogDataProvider(fetcher=mock_fetcher)

    assert provider.get_latest_year(ArchiveType.PGDUMP) == 2023
    mock_fetcher.fetch_snapshots_page.assert_called_once_with(ArchiveType.PGDUMP)


def test_get_monthly_archives_reads_year_page(mock_fetcher):
    provider = CatalogDataProvider(fetcher=mock_fetcher)

    records = provider.get_monthly_archives(ArchiveType.FLATFILES, 2023)

    mock_fetcher.fetch_snapshots_page.assert_called_once_with(ArchiveType.FLATFILES, year=2023)
    assert [r["file"] for r in records] == ["20230501.zip", "20230401.zip"]
    assert records[0]["url"] == "/monthly/20230501.zip"


def test_get_daily_archives_reads_daily_section(mock_fetcher):
    provider = CatalogDataProvider(fetcher=mock_fetcher)

    records = provider.get_daily_archives(ArchiveType.FLATFILES, page=2)

    mock_fetcher.fetch_snapshots_page.assert_called_once_with(ArchiveType.FLATFILES, page=2)
    assert records == [{"date": "06-10-2023", "file": "20230610.zip", "url": "/daily/20230610.zip"}]


def test_missing_monthly_table_returns_empty_with_warning(mock_fetcher):
    mock_fetcher.fetch_snapshots_page.return_value = BeautifulSoup("<html></html>", "html.parser")
    provider = CatalogDataProvider(fetcher=mock_fetcher)

    with pytest.warns(CatalogStructureWarning, match="pgdump 2019"):
        records = provider.get_monthly_archives(ArchiveType.PGDUMP, 2019)

    assert records == []


def test_missing_year_navigation_raises(mock_fetcher):
    mock_fetcher.fetch_snapshots_page.return_value = BeautifulSoup("<html></html>", "html.parser")
    provider = CatalogDataProvider(fetcher=mock_fetcher)

    with pytest.raises(StructuralMismatchError):
        provider.get_latest_year(ArchiveType.PGDUMP)


def test_transport_errors_propagate(mock_fetcher):
    mock_fetcher.fetch_snapshots_page.side_effect = CatalogServerError("down")
    provider = CatalogDataProvider(fetcher=mock_fetcher)

    with pytest.raises(CatalogServerError):
        provider.get_monthly_archives(ArchiveType.PGDUMP, 2020)


def test_builds_client_from_settings():
    provider = CatalogDataProvider(CatalogSettings(base_url="https://aact.test"))

    assert isinstance(provider.fetcher, CatalogClient)
    provider.close()


def test_requires_settings_or_fetcher():
    with pytest.raises(ValueError, match="settings or a fetcher"):
        CatalogDataProvider()


def test_close_delegates_to_fetcher(mock_fetcher):
    with CatalogDataProvider(fetcher=mock_fetcher):
        pass

    mock_fetcher.close.assert_called_once()
