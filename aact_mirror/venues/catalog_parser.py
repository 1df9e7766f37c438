"""
HTML structure knowledge for the AACT snapshots catalog.

**Conceptual**: The catalog pages are an external, unversioned contract. This
module is the one place that knows their shape:

    div.year-navigation                       ← year links (2017 … latest)
    div.snapshots-section  "Monthly Archives"
        div.snapshots-grid-table
            div.snapshots-grid-row.snapshots-grid-header   ← skipped
            div.snapshots-grid-row
                div[data-label="Date:"]  01-15-2024
                div[data-label="File"]   <a href="…/x.zip">x.zip</a>
                …
    div.snapshots-section  "Recent Daily Snapshots"
        div.snapshots-grid-table …

**Two severities of "the page looks wrong"**:
  - Table lookup (find_section_table): zero or several matching tables is
    *recoverable*. The lookup returns a SectionTableLookup describing what it
    found, emits a CatalogStructureWarning, and extraction yields no records.
    One year's page changing shape costs that year, not the run.
  - Year navigation (parse_latest_year): zero or several controls, or no
    year-shaped links, is *fatal* for the archive type and raises
    StructuralMismatchError. Without a horizon there is nothing sensible to plan.
"""

import re
import warnings
from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from aact_mirror.data.schemas import ArchiveRecord, URL_FIELD

MONTHLY_ARCHIVES_TITLE = "Monthly Archives"
DAILY_SNAPSHOTS_TITLE = "Recent Daily Snapshots"

SECTION_SELECTOR = 'div[class*="snapshots-section"]'
TABLE_SELECTOR = 'div[class*="snapshots-grid-table"]'
ROW_SELECTOR = 'div[class*="snapshots-grid-row"]'
HEADER_ROW_CLASS = "snapshots-grid-header"
CELL_SELECTOR = "div[data-label]"
YEAR_NAV_SELECTOR = 'div[class*="year-navigation"]'

YEAR_PATTERN = re.compile(r"\d{4}")


class StructuralMismatchError(Exception):
    """
    Raised when a page lacks a structure that has no sensible fallback.

    Only the year navigation lookup raises this. The orchestrator treats it as
    fatal for the archive type being synced and moves on to the next type.
    """
    pass


class CatalogStructureWarning(UserWarning):
    """Warning category for recoverable page-structure mismatches (missing/duplicate tables)."""
    pass


@dataclass
class SectionTableLookup:
    """
    Result of looking for the grid table of one titled section.

    Attributes:
        title: Section title searched for (e.g. "Monthly Archives").
        matches: Every distinct grid table found under a matching section.
    """
    title: str
    matches: List[Tag] = field(default_factory=list)

    @property
    def found(self) -> bool:
        """True when exactly one table matched."""
        return len(self.matches) == 1

    @property
    def table(self) -> Optional[Tag]:
        """The matched table, or None when the lookup was ambiguous or empty."""
        return self.matches[0] if self.found else None


def _class_string(node: Tag) -> str:
    classes = node.get("class") or []
    if isinstance(classes, str):
        return classes
    return " ".join(classes)


def find_section_table(page: BeautifulSoup, title: str) -> SectionTableLookup:
    """
    Find the grid table inside the section whose text contains title.

    Sections may nest, so the same table can be reached from more than one
    matching section; each table is counted once.

    Args:
        page: Parsed listing page.
        title: Human-readable section title.

    Returns:
        SectionTableLookup. Check .found before using .table.
    """
    lookup = SectionTableLookup(title=title)
    seen = set()

    for section in page.select(SECTION_SELECTOR):
        if title not in section.get_text():
            continue
        for table in section.select(TABLE_SELECTOR):
            if id(table) in seen:
                continue
            seen.add(id(table))
            lookup.matches.append(table)

    return lookup


def normalize_label(label: str) -> str:
    """
    Turn a data-label attribute into a record key.

    Example:
        >>> normalize_label("  Date: ")
        'date'
        >>> normalize_label("File Size")
        'file size'
    """
    return re.sub(r":$", "", label.strip().lower()).strip()


def extract_archive_records(table: Optional[Tag]) -> List[ArchiveRecord]:
    """
    Convert one grid table into ArchiveRecords.

    **Functionally**:
      - None (no table) → [].
      - Every grid row except the header row is considered, in page order.
      - Each [data-label] cell becomes one key (normalize_label) with the
        cell's trimmed text as value.
      - `url` is the href of the row's first link. Without a link, a labeled
        "URL" cell is kept, and otherwise `url` is "".
      - A row with no labeled cells produces no record.

    Args:
        table: The grid table node, or None.

    Returns:
        Records in source row order.

    Example:
        A row with cells Date:="01-15-2024", File="x.zip" and a link to
        https://example.org/x.zip gives
        {"date": "01-15-2024", "file": "x.zip", "url": "https://example.org/x.zip"}.
    """
    if table is None:
        return []

    records: List[ArchiveRecord] = []

    for row in table.select(ROW_SELECTOR):
        if HEADER_ROW_CLASS in _class_string(row):
            continue

        cells = row.select(CELL_SELECTOR)
        if not cells:
            continue

        record: ArchiveRecord = {}
        for cell in cells:
            record[normalize_label(cell.get("data-label", ""))] = cell.get_text().strip()

        link = row.find("a")
        href = link.get("href") if link is not None else None
        if href:
            record[URL_FIELD] = href.strip()
        else:
            record.setdefault(URL_FIELD, "")

        records.append(record)

    return records


def extract_section_records(page: BeautifulSoup, title: str, context: str = "") -> List[ArchiveRecord]:
    """
    Locate a titled section's table and extract its records.

    A missing or ambiguous table is not an error: a CatalogStructureWarning
    is emitted and [] is returned.

    Args:
        page: Parsed listing page.
        title: Section title (MONTHLY_ARCHIVES_TITLE or DAILY_SNAPSHOTS_TITLE).
        context: Text for the warning message (e.g. "pgdump 2023").

    Returns:
        Records of the section, or [] when no single table was found.
    """
    lookup = find_section_table(page, title)
    if not lookup.found:
        warnings.warn(
            f"Expected one '{title}' table for {context or 'page'}, "
            f"found {len(lookup.matches)}",
            CatalogStructureWarning,
            stacklevel=2,
        )
        return []
    return extract_archive_records(lookup.table)


def parse_latest_year(page: BeautifulSoup) -> int:
    """
    Read the latest published year from the year navigation control.

    **Functionally**:
      - Exactly one year-navigation div must exist.
      - Link texts are trimmed; only exact 4-digit texts count as years.
      - Returns the maximum year.

    Args:
        page: Parsed landing page for an archive type.

    Returns:
        Highest year linked from the navigation control.

    Raises:
        StructuralMismatchError: If there is not exactly one navigation
                                 control, or it links no years.
    """
    navs = page.select(YEAR_NAV_SELECTOR)
    if len(navs) != 1:
        raise StructuralMismatchError(
            f"Could not find year navigation: expected 1 control, found {len(navs)}"
        )

    years = [
        int(text)
        for text in (link.get_text().strip() for link in navs[0].find_all("a"))
        if YEAR_PATTERN.fullmatch(text)
    ]
    if not years:
        raise StructuralMismatchError("Year navigation contains no year links")

    return max(years)
