"""
Archive record types and the YearFile data contract.

**Conceptual**: The catalog's listing tables do not have a fixed set of
columns. The pgdump and flatfiles listings carry different columns, and the
site has added and renamed columns over time. An ArchiveRecord is therefore an
open, ordered mapping (column label → text) rather than a fixed struct. The
only guarantees are:
  - Every record has a `url` key (the row's primary link, "" when the row had none).
  - Monthly and daily records usually have a `date` key in MM-DD-YYYY form.
    When it is missing or malformed the record is still valid; it simply
    cannot take part in date-based decisions.

Key order inside a record is the order the columns appeared on the page, and
YearFile headers are built from first-seen key order across records, so
files are stable across re-fetches when the page hasn't changed.
"""

import warnings
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional

import pandas as pd


class SchemaValidationError(Exception):
    """
    Raised when records or a YearFile do not satisfy the record contract.

    Typical causes: a record without a `url` key, or a YearFile on disk that
    cannot be parsed as tab-separated text.
    """
    pass


class ArchiveType(Enum):
    """
    The independent catalogs mirrored by this project.

    The value is both the `type=` query parameter on the catalog and the
    directory name under the metadata root.
    """
    PGDUMP = "pgdump"
    FLATFILES = "flatfiles"

    @property
    def label(self) -> str:
        """Human-readable name for progress output."""
        return {
            ArchiveType.PGDUMP: "full database dump",
            ArchiveType.FLATFILES: "flat files",
        }[self]

    def __str__(self) -> str:
        return self.value


# One scraped catalog row. Plain dicts keep insertion order, which is the
# column order on the page.
ArchiveRecord = Dict[str, str]

URL_FIELD = "url"
DATE_FIELD = "date"

# Formats seen in the catalog's "Date" column, most common first.
ARCHIVE_DATE_FORMATS = ("%m-%d-%Y", "%m/%d/%Y")


def parse_archive_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a catalog date ("01-15-2024") into a date.

    The catalog's own formats are tried first. Anything else is read month
    first ("06-01-24", "June 1, 2024") so that a drift in the date format still
    yields a date. Parse failures are never raised: the caller treats None as
    "date unknown".

    Args:
        value: Raw text from the record's `date` field (may be None or blank).

    Returns:
        The parsed date, or None if value is empty or not a date.

    Example:
        >>> parse_archive_date("06-01-2024")
        datetime.date(2024, 6, 1)
        >>> parse_archive_date("June 1, 2024")
        datetime.date(2024, 6, 1)
        >>> parse_archive_date("soon") is None
        True
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    for fmt in ARCHIVE_DATE_FORMATS:
        parsed = pd.to_datetime(text, format=fmt, errors="coerce")
        if not pd.isna(parsed):
            return parsed.date()

    # Free-form text needs a digit; pandas reads words like "today" as now
    if not any(ch.isdigit() for ch in text):
        return None
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        parsed = pd.to_datetime(text, errors="coerce", dayfirst=False)
    if pd.isna(parsed):
        return None
    return parsed.date()


def collect_columns(records: Iterable[ArchiveRecord]) -> List[str]:
    """
    Union of record keys in first-seen order (the YearFile header).

    Example:
        >>> collect_columns([{"date": "a", "url": "u"}, {"date": "b", "size": "1", "url": "v"}])
        ['date', 'url', 'size']
    """
    columns: Dict[str, None] = {}
    for record in records:
        for key in record:
            columns.setdefault(key, None)
    return list(columns)


def validate_archive_records(
    records: Iterable[ArchiveRecord],
    context: Optional[str] = None,
) -> None:
    """
    Check that every record satisfies the ArchiveRecord contract.

    Args:
        records: Records about to be persisted.
        context: Optional description (e.g. "pgdump 2024") for error messages.

    Raises:
        SchemaValidationError: If a record is not a mapping of str to str,
                               or has no `url` key.
    """
    ctx = f"{context}: " if context else ""

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise SchemaValidationError(
                f"{ctx}Record {index} is a {type(record).__name__}, expected a dict."
            )
        if URL_FIELD not in record:
            raise SchemaValidationError(
                f"{ctx}Record {index} has no '{URL_FIELD}' field. "
                f"Found keys: {list(record.keys())}."
            )
        bad_keys = [k for k, v in record.items() if not isinstance(k, str) or not isinstance(v, str)]
        if bad_keys:
            raise SchemaValidationError(
                f"{ctx}Record {index} has non-text keys or values for: {bad_keys}."
            )
