"""
Catalog data provider: listing pages → ArchiveRecords.

**Conceptual**: This module bridges CatalogClient (which returns parsed HTML
pages) and the orchestration layer (which wants records and years). It
implements the ArchiveSource protocol from base.py.

**Layered architecture**:
  1. CatalogClient: HTTP layer, returns BeautifulSoup pages
  2. CatalogDataProvider (this file): picks the right page and section per
     request and runs the parser over it
  3. Orchestration: decides which years to ask for and what to persist

Transport failures from the client propagate unchanged; structural problems
follow catalog_parser's rules (fatal for the year horizon, an empty result
plus a warning for tables).
"""

from typing import List, Optional

from aact_mirror.config.settings import CatalogSettings
from aact_mirror.data.schemas import ArchiveRecord, ArchiveType
from aact_mirror.venues.base import CatalogPageFetcher
from aact_mirror.venues.catalog_client import CatalogClient
from aact_mirror.venues.catalog_parser import (
    DAILY_SNAPSHOTS_TITLE,
    MONTHLY_ARCHIVES_TITLE,
    extract_section_records,
    parse_latest_year,
)


class CatalogDataProvider:
    """
    ArchiveSource implementation for the AACT snapshots catalog.

    **Example usage**:
        >>> from aact_mirror.config.settings import get_settings
        >>> with CatalogDataProvider(get_settings().catalog) as provider:
        ...     latest = provider.get_latest_year(ArchiveType.FLATFILES)
        ...     records = provider.get_monthly_archives(ArchiveType.FLATFILES, latest)
    """

    def __init__(
        self,
        settings: Optional[CatalogSettings] = None,
        fetcher: Optional[CatalogPageFetcher] = None,
    ):
        """
        Initialize the provider.

        Args:
            settings: Catalog settings used to build a CatalogClient when no
                      fetcher is given.
            fetcher: Optional page fetcher (tests inject a fake here).

        Raises:
            ValueError: If neither settings nor fetcher is given.
        """
        if fetcher is None:
            if settings is None:
                raise ValueError("CatalogDataProvider needs either settings or a fetcher")
            fetcher = CatalogClient(settings)
        self.fetcher = fetcher

    def get_latest_year(self, archive_type: ArchiveType) -> int:
        """
        Most recent year with published monthly archives (the horizon year).

        Raises:
            StructuralMismatchError: If the landing page has no single year navigation.
            CatalogClientError / requests.Timeout: If the page cannot be fetched.
        """
        page = self.fetcher.fetch_snapshots_page(archive_type)
        return parse_latest_year(page)

    def get_monthly_archives(self, archive_type: ArchiveType, year: int) -> List[ArchiveRecord]:
        """
        Monthly archive records published for one year.

        Returns [] (with a CatalogStructureWarning) when the page has no
        single "Monthly Archives" table.

        Raises:
            CatalogClientError / requests.Timeout: If the page cannot be fetched.
        """
        page = self.fetcher.fetch_snapshots_page(archive_type, year=year)
        return extract_section_records(
            page,
            MONTHLY_ARCHIVES_TITLE,
            context=f"{archive_type.value} {year}",
        )

    def get_daily_archives(self, archive_type: ArchiveType, page: int = 1) -> List[ArchiveRecord]:
        """
        Recent daily snapshot records from one page of the daily listing.

        Returns [] (with a CatalogStructureWarning) when the page has no
        single "Recent Daily Snapshots" table.

        Raises:
            CatalogClientError / requests.Timeout: If the page cannot be fetched.
        """
        listing = self.fetcher.fetch_snapshots_page(archive_type, page=page)
        return extract_section_records(
            listing,
            DAILY_SNAPSHOTS_TITLE,
            context=f"{archive_type.value} page {page}",
        )

    def close(self):
        """Close the underlying fetcher if it holds resources."""
        close = getattr(self.fetcher, "close", None)
        if callable(close):
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
