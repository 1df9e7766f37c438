"""
Base abstractions for catalog access.

**Conceptual**: The orchestrator never talks to HTTP directly. It depends on
two small protocols:
  - CatalogPageFetcher: "give me the parsed listing page for this type and
    year/page". CatalogClient implements it over HTTP; tests pass a fake that
    returns canned BeautifulSoup trees.
  - ArchiveSource: the record-level view (latest year, monthly archives for a
    year). CatalogDataProvider implements it on top of a CatalogPageFetcher.

Protocols are structural: any object with matching methods qualifies, no
inheritance required.
"""

from typing import List, Optional, Protocol

from bs4 import BeautifulSoup

from aact_mirror.data.schemas import ArchiveRecord, ArchiveType


class CatalogPageFetcher(Protocol):
    """
    Protocol for retrieving a rendered catalog listing page.

    **Contract**:
      - Returns the parsed page tree for
        /downloads/snapshots?type=<type>[&year=<year>][&page=<page>].
      - Any failure to obtain the page (network error, non-2xx status) is
        raised; there is no partial result and no retry.
    """

    def fetch_snapshots_page(
        self,
        archive_type: ArchiveType,
        year: Optional[int] = None,
        page: Optional[int] = None,
    ) -> BeautifulSoup:
        """
        Fetch and parse one listing page.

        Args:
            archive_type: Catalog to query.
            year: Year partition of the monthly listing (None for the landing page).
            page: Page number of the daily listing (None for the first page).

        Returns:
            Parsed page tree.
        """
        ...


class ArchiveSource(Protocol):
    """Record-level catalog access used by the sync orchestrator."""

    def get_latest_year(self, archive_type: ArchiveType) -> int:
        """Most recent year with published monthly archives. Raises on failure."""
        ...

    def get_monthly_archives(self, archive_type: ArchiveType, year: int) -> List[ArchiveRecord]:
        """Monthly archive records for one year. Empty when the table is not found."""
        ...
