"""
HTTP client for the AACT snapshots catalog.

**Conceptual**: This module is a thin wrapper around requests. It builds
listing URLs, applies timeouts and headers, maps HTTP failures to descriptive
exceptions, and hands back parsed BeautifulSoup trees. It knows nothing about
which div holds which table: that is catalog_parser's job.

**Layers**:
  1. CatalogClient (this file): HTTP requests/responses → page trees, file downloads.
  2. catalog_parser: page trees → ArchiveRecords / latest year.
  3. CatalogDataProvider: combines the two per archive type.

There is no retry here. A failed fetch raises; the orchestrator
decides whether that costs a year or a whole archive type, and the next run
picks the year up again because it is still missing on disk.
"""

from pathlib import Path
from typing import Dict, Optional, Union
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from aact_mirror.config.settings import CatalogSettings
from aact_mirror.data.schemas import ArchiveType


class CatalogClientError(Exception):
    """
    Base exception for catalog transport failures.

    Callers catch CatalogClientError to handle every catalog-related HTTP
    failure at once, or one of the subclasses for finer handling.
    """
    pass


class CatalogNotFoundError(CatalogClientError):
    """
    Raised on 404 Not Found.

    Usually a year or page that the catalog does not serve (yet), or a
    snapshot file that has been rotated out.
    """
    pass


class CatalogRateLimitError(CatalogClientError):
    """Raised on 429 Too Many Requests."""
    pass


class CatalogServerError(CatalogClientError):
    """
    Raised when the catalog returns a 5xx status.

    **Recovery**: Nothing to do locally; the next run fetches the same years again.
    """
    pass


DOWNLOAD_CHUNK_SIZE = 1024 * 1024


class CatalogClient:
    """
    Thin HTTP client for the AACT snapshots catalog.

    **Responsibilities**:
      - Construct listing URLs (type / year / page query parameters)
      - Make HTTP requests with timeout and User-Agent
      - Map HTTP errors (404, 429, 4xx, 5xx, connection, timeout) to exceptions
      - Parse HTML responses into BeautifulSoup trees
      - Stream large files (snapshots, definitions) to disk

    **NOT responsible for**:
      - Locating tables or navigation controls in the page (catalog_parser)
      - Deciding what to fetch (orchestration)

    **Example usage**:
        >>> from aact_mirror.config.settings import get_settings
        >>> with CatalogClient(get_settings().catalog) as client:
        ...     page = client.fetch_snapshots_page(ArchiveType.PGDUMP, year=2023)
    """

    def __init__(self, settings: CatalogSettings):
        """
        Initialize the client with catalog settings.

        Args:
            settings: Catalog configuration (base_url, timeouts, user_agent).
        """
        self.settings = settings
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": self.settings.user_agent,
            "Accept": "text/html,application/xhtml+xml",
        })

    def fetch_snapshots_page(
        self,
        archive_type: ArchiveType,
        year: Optional[int] = None,
        page: Optional[int] = None,
    ) -> BeautifulSoup:
        """
        Fetch one snapshots listing page and parse it.

        **HTTP request details**:
          - Method: GET
          - URL: {base_url}/downloads/snapshots
          - Query params: type (always), year (monthly listing), page (daily listing)
          - Timeout: settings.timeout_seconds

        Args:
            archive_type: Catalog to query.
            year: Year partition for the monthly listing, or None.
            page: Daily listing page number, or None.

        Returns:
            Parsed page tree (html.parser).

        Raises:
            CatalogNotFoundError: On 404.
            CatalogRateLimitError: On 429.
            CatalogServerError: On 5xx.
            CatalogClientError: On other 4xx, connection failures, other request errors.
            requests.Timeout: If the request exceeds the timeout.
            ValueError: If year or page is not a positive integer.
        """
        if year is not None and year <= 0:
            raise ValueError(f"year must be a positive integer, got: {year}")
        if page is not None and page <= 0:
            raise ValueError(f"page must be a positive integer, got: {page}")

        params: Dict[str, Union[str, int]] = {"type": archive_type.value}
        if year is not None:
            params["year"] = year
        if page is not None:
            params["page"] = page

        url = self.settings.snapshots_url

        try:
            response = self.session.get(
                url,
                params=params,
                timeout=self.settings.timeout_seconds,
            )
            self._raise_for_status(response, what=f"{archive_type.value} listing {params}")
            return BeautifulSoup(response.text, "html.parser")

        except requests.Timeout as e:
            raise requests.Timeout(
                f"Request to {url} timed out after {self.settings.timeout_seconds}s. "
                f"Check network connection or increase AACT_TIMEOUT_SECONDS."
            ) from e

        except requests.ConnectionError as e:
            raise CatalogClientError(
                f"Failed to connect to catalog at {self.settings.base_url}. "
                f"Check network connection and base URL."
            ) from e

        except requests.RequestException as e:
            raise CatalogClientError(f"HTTP request failed: {e}") from e

    def resolve_url(self, href: str) -> str:
        """Resolve a link from a listing page (may be relative) against the base URL."""
        return urljoin(self.settings.base_url.rstrip("/") + "/", href)

    def download_file(self, url: str, destination: Path | str) -> Path:
        """
        Stream a file to disk.

        **Functionally**:
          - Relative URLs are resolved against the catalog base URL.
          - Bytes go to "<destination>.part" first and are renamed into place
            once the download completes, so an interrupted download never
            looks like a finished file.
          - Uses settings.download_timeout_seconds.

        Args:
            url: File URL (absolute, or relative to the catalog).
            destination: Target path. Parent directories are created.

        Returns:
            The destination path.

        Raises:
            Same exceptions as fetch_snapshots_page.
        """
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        part_path = destination.with_name(destination.name + ".part")
        full_url = self.resolve_url(url)

        try:
            with self.session.get(
                full_url,
                stream=True,
                timeout=self.settings.download_timeout_seconds,
            ) as response:
                self._raise_for_status(response, what=full_url)
                with open(part_path, "wb") as fh:
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
            part_path.replace(destination)
            return destination

        except requests.Timeout as e:
            part_path.unlink(missing_ok=True)
            raise requests.Timeout(
                f"Download of {full_url} timed out after {self.settings.download_timeout_seconds}s."
            ) from e

        except requests.ConnectionError as e:
            part_path.unlink(missing_ok=True)
            raise CatalogClientError(f"Failed to connect while downloading {full_url}.") from e

        except requests.RequestException as e:
            part_path.unlink(missing_ok=True)
            raise CatalogClientError(f"Download of {full_url} failed: {e}") from e

        except CatalogClientError:
            part_path.unlink(missing_ok=True)
            raise

    def _raise_for_status(self, response: requests.Response, what: str) -> None:
        """Map a non-2xx response to the matching CatalogClientError subclass."""
        status = response.status_code

        if status == 404:
            raise CatalogNotFoundError(f"Not found: {what} (status 404).")

        if status == 429:
            raise CatalogRateLimitError(
                f"Rate limit exceeded while fetching {what}. Slow down requests."
            )

        if status >= 500:
            raise CatalogServerError(
                f"Catalog server error (status {status}) while fetching {what}."
            )

        if 400 <= status < 500:
            raise CatalogClientError(
                f"Client error (status {status}) while fetching {what}. "
                f"Request may be malformed."
            )

        response.raise_for_status()

    def close(self):
        """Close the HTTP session and release pooled connections."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
