import logging

import pytest

from agrospace.config.settings import get_logging_config, get_settings
from agrospace.core.env import get_data_root, resolve_data_path
from agrospace.core.logging import configure_logging


@pytest.fixture
def fresh_data_root():
    get_data_root.cache_clear()
    yield
    get_data_root.cache_clear()


def test_data_root_is_found_from_working_directory(monkeypatch, tmp_path, fresh_data_root):
    (tmp_path / "data" / "coord").mkdir(parents=True)
    nested = tmp_path / "notebooks" / "scratch"
    nested.mkdir(parents=True)
    monkeypatch.delenv("AGROSPACE_DATA_ROOT", raising=False)
    monkeypatch.chdir(nested)

    assert get_data_root() == tmp_path.resolve()
    assert resolve_data_path("data/coord/fields.kml") == (tmp_path / "data" / "coord" / "fields.kml").resolve()


def test_data_root_env_override(monkeypatch, tmp_path, fresh_data_root):
    monkeypatch.setenv("AGROSPACE_DATA_ROOT", str(tmp_path))
    assert resolve_data_path("centroids.kml") == (tmp_path / "centroids.kml").resolve()


def test_absolute_data_paths_are_kept(tmp_path):
    assert resolve_data_path(tmp_path / "fields.kml") == tmp_path / "fields.kml"


def test_configure_logging_sets_package_level_without_touching_cached_config():
    try:
        configure_logging("debug")
        assert logging.getLogger("agrospace").level == logging.DEBUG
        assert logging.getLogger("agrospace.catalog.fields").isEnabledFor(logging.DEBUG)
        assert get_logging_config()["loggers"]["agrospace"]["level"] == "INFO"
    finally:
        configure_logging()


def test_configure_logging_defaults_to_settings_level():
    configure_logging()
    expected = getattr(logging, get_settings().app.log_level.upper())
    assert logging.getLogger("agrospace").level == expected
