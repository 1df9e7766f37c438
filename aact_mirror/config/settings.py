"""
Configuration settings for the catalog mirror.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). All settings are validated
at startup, so a bad timeout or empty base URL fails before the first page is
fetched rather than halfway through a sync.

**What is configurable**:
  - Where the catalog lives (AACT_BASE_URL) and how long to wait for it.
  - Where mirrored metadata, schema documentation, and downloaded snapshots
    are written on disk.

Nothing here is secret: the AACT snapshots catalog is public and needs no
API key. The .env file is still supported so that local runs can point at a
staging copy of the catalog or a different output tree.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (no-op if the file does not exist)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _read_int(name: str, default: str) -> int:
    """Read an integer environment variable, with a readable error on bad input."""
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw}")


@dataclass(frozen=True)
class CatalogSettings:
    """
    Configuration for the AACT snapshots catalog.

    **Conceptual**: The catalog is a public HTML site. Each archive type has a
    landing page (/downloads/snapshots?type=...) with a year navigation control,
    one page per year listing the monthly archives, and paged listings of
    recent daily snapshots.

    Attributes:
        base_url: Root URL of the catalog site, without trailing slash.
        timeout_seconds: Timeout for listing page requests (default 30).
        download_timeout_seconds: Timeout for snapshot and definitions
                                  downloads (default 1800, snapshots are large).
        user_agent: User-Agent header sent with every request.
    """
    base_url: str = "https://aact.ctti-clinicaltrials.org"
    timeout_seconds: int = 30
    download_timeout_seconds: int = 1800
    user_agent: str = "aact_mirror/1.0"

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.base_url:
            raise ValueError(
                "AACT_BASE_URL is required but empty. "
                "Unset it to use the public catalog, or set it in your .env file."
            )
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got: {self.timeout_seconds}"
            )
        if self.download_timeout_seconds <= 0:
            raise ValueError(
                f"download_timeout_seconds must be positive, got: {self.download_timeout_seconds}"
            )

    @property
    def snapshots_url(self) -> str:
        """Full URL of the snapshots listing endpoint."""
        return f"{self.base_url.rstrip('/')}/downloads/snapshots"

    @property
    def definitions_url(self) -> str:
        """Full URL of the data dictionary export."""
        return f"{self.base_url.rstrip('/')}/definitions.csv"

    @classmethod
    def from_env(cls) -> "CatalogSettings":
        """
        Load catalog settings from environment variables.

        **Environment variables** (all optional):
          - AACT_BASE_URL: Catalog root (default "https://aact.ctti-clinicaltrials.org").
          - AACT_TIMEOUT_SECONDS: Listing request timeout (default 30).
          - AACT_DOWNLOAD_TIMEOUT_SECONDS: Download timeout (default 1800).
          - AACT_USER_AGENT: User-Agent header (default "aact_mirror/1.0").

        Returns:
            CatalogSettings object with values loaded from environment.

        Raises:
            ValueError: If a timeout is not a positive integer or the base URL is empty.
        """
        return cls(
            base_url=os.getenv("AACT_BASE_URL", "https://aact.ctti-clinicaltrials.org"),
            timeout_seconds=_read_int("AACT_TIMEOUT_SECONDS", "30"),
            download_timeout_seconds=_read_int("AACT_DOWNLOAD_TIMEOUT_SECONDS", "1800"),
            user_agent=os.getenv("AACT_USER_AGENT", "aact_mirror/1.0"),
        )


@dataclass(frozen=True)
class PathSettings:
    """
    Output locations on disk.

    Attributes:
        metadata_dir: Root of the mirrored monthly metadata. YearFiles live at
                      <metadata_dir>/<type>/<year>.tsv.
        doc_dir: Where the schema definitions workbook is saved.
        download_dir: Where downloaded daily snapshots are saved.
    """
    metadata_dir: Path = Path("metadata/export-monthly")
    doc_dir: Path = Path("metadata/doc")
    download_dir: Path = Path("download")

    @classmethod
    def from_env(cls) -> "PathSettings":
        """
        Load output paths from environment variables.

        **Environment variables** (all optional):
          - AACT_METADATA_DIR (default "metadata/export-monthly")
          - AACT_DOC_DIR (default "metadata/doc")
          - AACT_DOWNLOAD_DIR (default "download")
        """
        return cls(
            metadata_dir=Path(os.getenv("AACT_METADATA_DIR", "metadata/export-monthly")),
            doc_dir=Path(os.getenv("AACT_DOC_DIR", "metadata/doc")),
            download_dir=Path(os.getenv("AACT_DOWNLOAD_DIR", "download")),
        )


@dataclass(frozen=True)
class Settings:
    """
    Global settings for the mirror.

    **Usage pattern**:
      ```python
      from aact_mirror.config.settings import get_settings

      settings = get_settings()
      client = CatalogClient(settings.catalog)
      metadata_dir = settings.paths.metadata_dir
      ```

    Attributes:
        catalog: Catalog endpoint and HTTP settings.
        paths: Output directories.
    """
    catalog: CatalogSettings
    paths: PathSettings

    @classmethod
    def from_env(cls) -> "Settings":
        """Load all subsystem settings from the environment."""
        return cls(
            catalog=CatalogSettings.from_env(),
            paths=PathSettings.from_env(),
        )


# Lazily-created singleton. Tests construct Settings directly or call reset_settings().
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.

    Returns:
        Global Settings singleton.

    Raises:
        ValueError: If any environment variable holds an invalid value.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """Clear the cached settings so the next get_settings() re-reads the environment."""
    global _default_settings
    _default_settings = None
