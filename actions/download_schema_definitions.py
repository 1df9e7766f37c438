#!/usr/bin/env python3
"""
Download the AACT data dictionary into metadata/doc/.

The catalog serves its table/column definitions at /definitions.csv, but the
payload is really an Excel workbook, so it is saved as definitions.xlsx.

**Usage**:
    python actions/download_schema_definitions.py
"""

import sys
from pathlib import Path

# Add project root to Python path so we can import aact_mirror
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from aact_mirror.config.settings import get_settings
from aact_mirror.venues.catalog_client import CatalogClient, CatalogClientError

DEFINITIONS_FILE_NAME = "definitions.xlsx"


def main():
    try:
        try:
            settings = get_settings()
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        destination = settings.paths.doc_dir / DEFINITIONS_FILE_NAME
        print(f"Metadata path: {settings.paths.doc_dir}")

        with CatalogClient(settings.catalog) as client:
            try:
                client.download_file(settings.catalog.definitions_url, destination)
            except CatalogClientError as e:
                print(f"  ✗ Download failed: {e}", file=sys.stderr)
                sys.exit(2)

        print(f"  ✓ Saved definitions to {destination}")
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
