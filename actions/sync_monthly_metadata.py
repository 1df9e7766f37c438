#!/usr/bin/env python3
"""
Mirror AACT monthly archive metadata into metadata/export-monthly/.

**Purpose**: Incrementally sync the "Monthly Archives" listings of both
archive types (pgdump, then flatfiles) into one TSV per (type, year). Only
missing years and the most recent local year onward are fetched; the current
month is never written.

**Usage**:
    python actions/sync_monthly_metadata.py

There are no flags. Configuration comes from the environment / .env file
(AACT_BASE_URL, AACT_METADATA_DIR, ...; see aact_mirror/config/settings.py).

**Exit codes**:
  - 0: Run completed. Individual types or years may still have failed; they
       are listed in the summary and will be retried by the next run.
  - 1: Configuration error.
  - 2: Unexpected fatal error.
  - 130: Interrupted.

**Example output**:
    $ python actions/sync_monthly_metadata.py
    Starting monthly metadata download
    Processing type: pgdump (full database dump)
      Latest year available: 2024
      Existing years: 2017, 2018, 2019, 2020, 2021, 2022, 2023, 2024
      Years to fetch: 2024
      Fetching pgdump archives for year 2024
      ✓ Wrote 5 archives to metadata/export-monthly/pgdump/2024.tsv
    ...
    Done!
"""

import argparse
import sys
from pathlib import Path
from typing import List

# Add project root to Python path so we can import aact_mirror
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from aact_mirror.config.settings import get_settings
from aact_mirror.orchestration.type_sync import CatalogSyncOrchestrator, TypeSyncResult
from aact_mirror.venues.catalog_data_provider import CatalogDataProvider


def parse_args(argv=None):
    """Parse command line arguments (there are none beyond --help)."""
    parser = argparse.ArgumentParser(
        description="Incrementally mirror AACT monthly archive metadata (pgdump and flatfiles).",
    )
    return parser.parse_args(argv)


def print_summary(results: List[TypeSyncResult]) -> None:
    """Print one block per archive type: written, skipped and failed years."""
    print("=" * 60)
    for result in results:
        if result.error:
            print(f"{result.archive_type.value}: ✗ {result.error}")
            continue

        print(
            f"{result.archive_type.value}: {len(result.written)} written, "
            f"{len(result.skipped)} skipped, {len(result.failed)} failed "
            f"(latest year {result.latest_year})"
        )
        for year, count in sorted(result.written.items()):
            print(f"  ✓ {year}: {count} archives")
        for year, reason in sorted(result.skipped.items()):
            print(f"  ⚠ {year}: {reason}")
        for year, error in sorted(result.failed.items()):
            print(f"  ✗ {year}: {error}")


def main(argv=None):
    """
    Main entry point.

    **Error handling strategy**:
      - Configuration errors stop the run before anything is fetched (exit 1).
      - Per-type and per-year failures are contained by the orchestrator and
        only reported.
      - Anything unexpected is printed with a traceback (exit 2).
    """
    try:
        parse_args(argv)

        try:
            settings = get_settings()
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        print("Starting monthly metadata download")

        with CatalogDataProvider(settings.catalog) as provider:
            orchestrator = CatalogSyncOrchestrator(provider, settings.paths.metadata_dir)
            results = orchestrator.run()

        print_summary(results)
        print("Done!")
        sys.exit(0)

    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...")
        sys.exit(130)

    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(2)


if __name__ == "__main__":
    main()
