from __future__ import annotations

import sys
from pathlib import Path

import pytest
import respx
from typer.testing import CliRunner


# Ensure the repository-local ``src`` directory is importable when the project is
# not installed as a package.
SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


BASE_URL = "http://hecate.test"


@pytest.fixture
def respx_mock():
    with respx.mock(assert_all_called=False) as respx_mgr:
        yield respx_mgr


@pytest.fixture
def isolated_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HECX_HOME", str(tmp_path))
    for name in ("HECATE_URL", "HECATE_USERNAME", "HECATE_PASSWORD", "HECX_CONFIG_ENCRYPTION_KEY"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def cli_runner(isolated_home, monkeypatch):
    """Provide a CLI runner pointed at the mocked server."""

    monkeypatch.setenv("HECATE_URL", BASE_URL)
    return CliRunner()
