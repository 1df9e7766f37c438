"""
Per-archive-type sync orchestration.

**Conceptual**: For one archive type the orchestrator:
  1. Resolves the horizon year from the catalog's year navigation.
  2. Snapshots the years already on disk (once, before any write).
  3. Plans the years to fetch (sync_planner).
  4. For each planned year, ascending: fetch the year page, extract the
     "Monthly Archives" records, drop the open month (period_filter), and
     overwrite the YearFile if anything is left.

**Failure containment**:
  - Horizon failure (structural mismatch or transport failure): the type is
    abandoned, the error is recorded on its TypeSyncResult, and run() moves
    on to the next type.
  - Per-year failure (fetch error, write error): recorded for that year only;
    later years still run. Nothing is rolled back. The year stays missing on
    disk, so the next run plans it again.
  - Empty year (no table, no rows, or only current-month rows): skipped with
    the reason recorded; an existing file for that year is left alone.

No exception escapes run() for a single type.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import requests

from aact_mirror.data.io import list_existing_years, write_year_file, year_file_path
from aact_mirror.data.schemas import ArchiveType, SchemaValidationError
from aact_mirror.orchestration.period_filter import filter_open_period
from aact_mirror.orchestration.sync_planner import FIRST_CATALOG_YEAR, plan_years_to_fetch
from aact_mirror.utils.time import Clock, RealClock, current_period
from aact_mirror.venues.base import ArchiveSource
from aact_mirror.venues.catalog_client import CatalogClientError
from aact_mirror.venues.catalog_parser import StructuralMismatchError

DEFAULT_ARCHIVE_TYPES = (ArchiveType.PGDUMP, ArchiveType.FLATFILES)

SKIP_NOTHING_SCRAPED = "no archives found"
SKIP_ONLY_OPEN_PERIOD = "no archives found (after filtering current month)"


@dataclass
class TypeSyncResult:
    """
    Outcome of syncing one archive type.

    Attributes:
        archive_type: Which catalog was synced.
        latest_year: Horizon year, or None if it could not be resolved.
        existing_years: Years on disk before this run wrote anything (sorted).
        planned_years: Years the planner asked for (ascending).
        written: year → number of records written.
        skipped: year → reason nothing was written.
        failed: year → error message.
        error: Type-level fatal error (horizon resolution), or None.
    """
    archive_type: ArchiveType
    latest_year: Optional[int] = None
    existing_years: List[int] = field(default_factory=list)
    planned_years: List[int] = field(default_factory=list)
    written: Dict[int, int] = field(default_factory=dict)
    skipped: Dict[int, str] = field(default_factory=dict)
    failed: Dict[int, str] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True when the type ran to completion with no failed years."""
        return self.error is None and not self.failed


class CatalogSyncOrchestrator:
    """
    Runs the incremental monthly-metadata sync for each archive type.

    **Example usage**:
        >>> from aact_mirror.config.settings import get_settings
        >>> from aact_mirror.venues.catalog_data_provider import CatalogDataProvider
        >>> settings = get_settings()
        >>> with CatalogDataProvider(settings.catalog) as provider:
        ...     orchestrator = CatalogSyncOrchestrator(provider, settings.paths.metadata_dir)
        ...     results = orchestrator.run()
    """

    def __init__(
        self,
        source: ArchiveSource,
        metadata_dir: Path | str,
        clock: Optional[Clock] = None,
        origin_year: int = FIRST_CATALOG_YEAR,
    ):
        """
        Args:
            source: Record-level catalog access (CatalogDataProvider in production).
            metadata_dir: Root of the mirrored metadata tree.
            clock: Time source for the open-period filter (RealClock if None).
            origin_year: First catalog year considered by the planner.
        """
        self.source = source
        self.metadata_dir = Path(metadata_dir)
        self.clock = clock or RealClock()
        self.origin_year = origin_year

    def run(self, archive_types: Iterable[ArchiveType] = DEFAULT_ARCHIVE_TYPES) -> List[TypeSyncResult]:
        """
        Sync each archive type in order.

        A failure inside one type never stops the next one.

        Returns:
            One TypeSyncResult per archive type, in the order given.
        """
        results = []
        for archive_type in archive_types:
            try:
                results.append(self.sync_type(archive_type))
            except Exception as e:
                print(f"  ✗ Unexpected error while syncing {archive_type.value}: {e}")
                results.append(TypeSyncResult(archive_type=archive_type, error=f"unexpected error: {e}"))
        return results

    def sync_type(self, archive_type: ArchiveType) -> TypeSyncResult:
        """
        Sync one archive type end-to-end.

        Returns:
            TypeSyncResult describing what was written, skipped, and failed.
        """
        result = TypeSyncResult(archive_type=archive_type)
        print(f"Processing type: {archive_type.value} ({archive_type.label})")

        try:
            result.latest_year = self.source.get_latest_year(archive_type)
        except (StructuralMismatchError, CatalogClientError, requests.RequestException) as e:
            result.error = f"could not resolve latest year: {e}"
            print(f"  ✗ {archive_type.value}: {result.error}")
            return result
        print(f"  Latest year available: {result.latest_year}")

        # Snapshot before any write so this run's files are never read back as "existing"
        existing_years = list_existing_years(self.metadata_dir, archive_type)
        result.existing_years = sorted(existing_years)
        print(f"  Existing years: {', '.join(str(y) for y in result.existing_years) or '(none)'}")

        result.planned_years = plan_years_to_fetch(
            existing_years, result.latest_year, origin_year=self.origin_year
        )
        if not result.planned_years:
            print(f"  No years to fetch for {archive_type.value}")
            return result
        print(f"  Years to fetch: {', '.join(str(y) for y in result.planned_years)}")

        current_year, current_month = current_period(self.clock)

        for year in result.planned_years:
            self._sync_year(archive_type, year, current_year, current_month, result)

        return result

    def _sync_year(
        self,
        archive_type: ArchiveType,
        year: int,
        current_year: int,
        current_month: int,
        result: TypeSyncResult,
    ) -> None:
        """Fetch, extract, filter and persist one year, recording the outcome on result."""
        print(f"  Fetching {archive_type.value} archives for year {year}")

        try:
            archives = self.source.get_monthly_archives(archive_type, year)
        except (CatalogClientError, requests.RequestException) as e:
            result.failed[year] = str(e)
            print(f"  ✗ Failed to fetch {archive_type.value} {year}: {e}")
            return

        if not archives:
            result.skipped[year] = SKIP_NOTHING_SCRAPED
            print(f"  ⚠ No archives found for {archive_type.value} {year}")
            return

        archives = filter_open_period(archives, current_year, current_month)
        if not archives:
            result.skipped[year] = SKIP_ONLY_OPEN_PERIOD
            print(f"  ⚠ No archives found for {archive_type.value} {year} (after filtering current month)")
            return

        output_file = year_file_path(self.metadata_dir, archive_type, year)
        try:
            write_year_file(archives, output_file)
        except (OSError, SchemaValidationError) as e:
            result.failed[year] = str(e)
            print(f"  ✗ Failed to write {output_file}: {e}")
            return

        result.written[year] = len(archives)
        print(f"  ✓ Wrote {len(archives)} archives to {output_file}")
