"""
Tests for the schema definitions download action.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

# Add project root to path so we can import actions module
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from actions.download_schema_definitions import main
from aact_mirror.config.settings import CatalogSettings, PathSettings, Settings
from aact_mirror.venues.catalog_client import CatalogNotFoundError


def run_main(tmp_path, download_side_effect=None):
    settings = Settings(
        catalog=CatalogSettings(base_url="https://aact.test"),
        paths=PathSettings(doc_dir=tmp_path / "doc"),
    )
    client = MagicMock()
    client.__enter__.return_value = client
    client.__exit__.return_value = False
    client.download_file.side_effect = download_side_effect

    with patch("actions.download_schema_definitions.get_settings", return_value=settings), \
            patch("actions.download_schema_definitions.CatalogClient", return_value=client):
        with pytest.raises(SystemExit) as exc_info:
            main()

    return exc_info.value.code, client


def test_definitions_saved_as_workbook(tmp_path):
    code, client = run_main(tmp_path)

    assert code == 0
    client.download_file.assert_called_once_with(
        "https://aact.test/definitions.csv",
        tmp_path / "doc" / "definitions.xlsx",
    )


def test_download_failure_exits_2(tmp_path):
    code, _ = run_main(tmp_path, download_side_effect=CatalogNotFoundError("Not found"))
    assert code == 2


def test_download_timeout_exits_2(tmp_path, capsys):
    code, _ = run_main(tmp_path, download_side_effect=requests.Timeout("timed out after 1800s"))

    assert code == 2
    assert "Fatal error: timed out after 1800s" in capsys.readouterr().err
