"""
Test configuration and fixtures for html2md.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to the Python path to ensure imports work correctly
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from html2md.core.config import Html2MdSettings, reset_settings  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep HTML2MD_* variables from the environment out of the tests."""
    for name in list(Html2MdSettings.model_fields):
        monkeypatch.delenv(f"HTML2MD_{name.upper()}", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    """Default settings, independent of the global instance."""
    return Html2MdSettings()


@pytest.fixture
def write_html(tmp_path):
    """Write an HTML document into the temporary directory."""

    def _write(name: str, html: str) -> Path:
        path = tmp_path / name
        path.write_text(html, encoding="utf-8")
        return path

    return _write
