import pytest

from lms.config import settings
from lms.patron import Patron
from lms.patron_manager import PatronManager
from lms.ui_helpers import OUTPUT_MODE_ENV


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path, monkeypatch):
    # Keep user preferences and env-driven defaults out of every test
    monkeypatch.setattr(settings, "config_dir", tmp_path / "lms-cli")
    monkeypatch.setattr(settings, "data_file", None)
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")


@pytest.fixture
def manager():
    return PatronManager()


@pytest.fixture
def alice():
    return Patron(1000001, "Alice", "1 Elm St", 0.0)


@pytest.fixture
def data_file(tmp_path):
    return str(tmp_path / "patrons.txt")
