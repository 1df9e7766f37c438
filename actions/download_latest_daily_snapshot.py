#!/usr/bin/env python3
"""
Download the newest daily flatfiles snapshot into download/.

**Purpose**: Read the first page of the "Recent Daily Snapshots" listing for
the flatfiles archive type, pick the row with the latest date, and stream its
file to <download_dir>/<file name>.

**Usage**:
    python actions/download_latest_daily_snapshot.py
    python actions/download_latest_daily_snapshot.py --type pgdump
    python actions/download_latest_daily_snapshot.py --output-dir /data/aact

**Requirements**:
  - Network access to the catalog
  - Enough disk space (flatfiles snapshots are a few GB zipped)

**Exit codes**:
  - 0: Snapshot downloaded.
  - 1: Configuration error, or no dated snapshot on the listing page.
  - 2: Download failed or unexpected error.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

# Add project root to Python path so we can import aact_mirror
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from aact_mirror.config.settings import get_settings
from aact_mirror.data.schemas import (
    ArchiveRecord,
    ArchiveType,
    DATE_FIELD,
    URL_FIELD,
    parse_archive_date,
)
from aact_mirror.venues.catalog_client import CatalogClient, CatalogClientError
from aact_mirror.venues.catalog_data_provider import CatalogDataProvider


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Download the most recent AACT daily snapshot",
    )
    parser.add_argument(
        "--type",
        choices=[t.value for t in ArchiveType],
        default=ArchiveType.FLATFILES.value,
        help="Archive type to download (default: flatfiles)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for the downloaded file (default: AACT_DOWNLOAD_DIR or download/)",
    )
    return parser.parse_args(argv)


def select_latest_daily_archive(records: List[ArchiveRecord]) -> Optional[ArchiveRecord]:
    """
    Pick the record with the latest parseable date.

    Records without a parseable date or without a url are not candidates.
    On equal dates the record listed last wins.

    Returns:
        The newest record, or None if there is no candidate.
    """
    latest = None
    latest_date = None
    for record in records:
        parsed = parse_archive_date(record.get(DATE_FIELD))
        if parsed is None or not record.get(URL_FIELD):
            continue
        if latest_date is None or parsed >= latest_date:
            latest, latest_date = record, parsed
    return latest


def snapshot_file_name(record: ArchiveRecord) -> str:
    """File name for a snapshot: the `file` column, or the last path segment of its url."""
    name = (record.get("file") or "").strip()
    if not name:
        name = Path(urlparse(record[URL_FIELD]).path).name
    if not name:
        raise ValueError(f"Cannot derive a file name for snapshot {record}")
    return name


def main(argv=None):
    """Fetch the daily listing, pick the newest snapshot, download it."""
    try:
        args = parse_args(argv)
        archive_type = ArchiveType(args.type)

        try:
            settings = get_settings()
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        output_dir = Path(args.output_dir) if args.output_dir else settings.paths.download_dir

        with CatalogClient(settings.catalog) as client:
            provider = CatalogDataProvider(fetcher=client)
            print(f"Fetching {archive_type.value} daily archives on page 1")
            daily_archives = provider.get_daily_archives(archive_type, page=1)

            latest = select_latest_daily_archive(daily_archives)
            if latest is None:
                print(f"Error: no dated {archive_type.value} daily snapshot found", file=sys.stderr)
                sys.exit(1)

            destination = output_dir / snapshot_file_name(latest)
            print(f"Downloading {latest[URL_FIELD]} to {destination}")
            try:
                client.download_file(latest[URL_FIELD], destination)
            except CatalogClientError as e:
                print(f"  ✗ Download failed: {e}", file=sys.stderr)
                sys.exit(2)

        print(f"  ✓ Saved {latest.get(DATE_FIELD)} snapshot to {destination}")
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
