import pytest

from agrospace.catalog.fields import FieldCatalog
from agrospace.config.settings import KML_NAMESPACE, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    # get_settings() is lru-cached; isolate env-driven tests from each other.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_default_settings_point_at_packaged_data_layout():
    settings = get_settings()
    assert settings.data.fields_path.endswith("fields.kml")
    assert settings.data.centroids_path.endswith("centroids.kml")
    assert settings.data.kml_namespace == KML_NAMESPACE


def test_env_overrides_data_paths_and_log_level(monkeypatch, tmp_path):
    monkeypatch.setenv("AGROSPACE_FIELDS_PATH", str(tmp_path / "f.kml"))
    monkeypatch.setenv("AGROSPACE_CENTROIDS_PATH", str(tmp_path / "c.kml"))
    monkeypatch.setenv("AGROSPACE_LOG_LEVEL", "debug")
    monkeypatch.setenv("AGROSPACE_CORS_ORIGINS", "http://a.example, http://b.example")

    settings = get_settings()
    assert settings.app.log_level == "debug"
    assert settings.api.cors_origins == ["http://a.example", "http://b.example"]

    catalog = FieldCatalog.from_settings(settings)
    assert catalog.fields_path == tmp_path / "f.kml"
    assert catalog.centroids_path == tmp_path / "c.kml"


def test_config_path_replaces_packaged_defaults(monkeypatch, tmp_path):
    config = tmp_path / "agrospace.yaml"
    config.write_text("data:\n  fields_path: /srv/kml/fields.kml\n", encoding="utf-8")
    monkeypatch.setenv("AGROSPACE_CONFIG_PATH", str(config))
    monkeypatch.delenv("AGROSPACE_FIELDS_PATH", raising=False)

    settings = get_settings()
    assert settings.data.fields_path == "/srv/kml/fields.kml"
    assert settings.data.centroids_path == "data/coord/centroids.kml"
