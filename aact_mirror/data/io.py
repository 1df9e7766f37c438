"""
YearFile readers and writers, and local sync state.

**Conceptual**: This module is the *only* I/O boundary for mirrored metadata.
Every YearFile is written and read through these functions so the on-disk
contract stays in one place:
  - Path: <metadata_dir>/<type>/<year>.tsv
  - Format: tab-separated, one header row (union of record keys, first-seen
    order), one line per record in source order, missing cells empty.
  - Writes replace the whole file. There is no append and no merge with the
    previous content: a re-fetched year is simply rewritten.

**Rule**: Never call pd.read_csv / df.to_csv on metadata files directly in
orchestration or action code. Use write_year_file / read_year_file.

The directory listing (list_existing_years) is the local sync state: the
set of years that already have a file is recomputed from disk on every run and
never stored anywhere else.
"""

from pathlib import Path
from typing import List, Set

import pandas as pd

from aact_mirror.data.schemas import (
    ArchiveRecord,
    ArchiveType,
    SchemaValidationError,
    collect_columns,
    validate_archive_records,
)

YEAR_FILE_SUFFIX = ".tsv"


def type_metadata_dir(metadata_dir: Path | str, archive_type: ArchiveType) -> Path:
    """Directory holding the YearFiles of one archive type."""
    return Path(metadata_dir) / archive_type.value


def year_file_path(metadata_dir: Path | str, archive_type: ArchiveType, year: int) -> Path:
    """
    Path of the YearFile for (archive_type, year).

    Example:
        >>> year_file_path("metadata/export-monthly", ArchiveType.PGDUMP, 2024)
        PosixPath('metadata/export-monthly/pgdump/2024.tsv')
    """
    return type_metadata_dir(metadata_dir, archive_type) / f"{year}{YEAR_FILE_SUFFIX}"


def list_existing_years(metadata_dir: Path | str, archive_type: ArchiveType) -> Set[int]:
    """
    Years that already have a YearFile for this archive type.

    **Functionally**:
      - Returns an empty set if the type directory does not exist yet.
      - Only *.tsv files count; the year is the file stem.
      - Files whose stem is not an integer (e.g. "notes.tsv") are ignored.

    Args:
        metadata_dir: Root of the mirrored metadata.
        archive_type: Which catalog to inspect.

    Returns:
        Set of years with a persisted file.
    """
    directory = type_metadata_dir(metadata_dir, archive_type)
    if not directory.is_dir():
        return set()

    years: Set[int] = set()
    for path in directory.glob(f"*{YEAR_FILE_SUFFIX}"):
        if not path.is_file():
            continue
        try:
            years.add(int(path.stem))
        except ValueError:
            continue
    return years


def write_year_file(records: List[ArchiveRecord], path: Path | str) -> None:
    """
    Write records to a YearFile, replacing any existing file.

    **Functionally**:
      - Validates records (every record needs a `url`).
      - Header is the union of keys in first-seen order.
      - Records missing a column get an empty cell.
      - Writes to "<name>.tmp" next to the target, then renames over it, so a
        crash mid-write never leaves a truncated YearFile behind.
      - Creates the parent directory if needed.

    Args:
        records: Non-empty list of records, in the order they should appear.
        path: Target file (e.g. metadata/export-monthly/pgdump/2024.tsv).

    Raises:
        ValueError: If records is empty (an empty YearFile is never written).
        SchemaValidationError: If a record breaks the record contract.
        OSError: If the file cannot be written.
    """
    path = Path(path)

    if not records:
        raise ValueError(f"Refusing to write an empty YearFile to {path}")

    validate_archive_records(records, context=str(path))

    path.parent.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame.from_records(records, columns=collect_columns(records))

    tmp_path = path.with_name(path.name + ".tmp")
    try:
        df.to_csv(tmp_path, sep="\t", index=False, na_rep="", lineterminator="\n")
        tmp_path.replace(path)
    except Exception as e:
        tmp_path.unlink(missing_ok=True)
        raise OSError(f"Failed to write YearFile to {path}. Error: {e}") from e


def read_year_file(path: Path | str) -> List[ArchiveRecord]:
    """
    Read a YearFile back into records.

    Every value comes back as text; empty cells come back as "" rather than
    NaN, so a read record compares equal to the record that was written when
    it had every column.

    Args:
        path: YearFile to read.

    Returns:
        List of records in file order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SchemaValidationError: If the file is empty or not parseable as TSV.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"YearFile not found: {path}")

    try:
        df = pd.read_csv(path, sep="\t", dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        raise SchemaValidationError(f"{path}: YearFile is empty (no header row).")
    except Exception as e:
        raise SchemaValidationError(f"{path}: Failed to read YearFile. Error: {e}")

    return df.to_dict(orient="records")
