from importlib import metadata

import pytest

from side_tree import version as version_module


@pytest.fixture(autouse=True)
def clear_cached_version(monkeypatch):
    monkeypatch.setattr(version_module, "_CACHED_VERSION", None)


def test_version_from_distribution_metadata(monkeypatch):
    monkeypatch.setattr(version_module.metadata, "version", lambda name: "1.4.0")
    monkeypatch.setattr(version_module.Path, "exists", lambda self: False)
    assert version_module.get_app_version() == "v1.4.0"


def test_version_falls_back_to_dev(monkeypatch):
    def _missing(name):
        raise metadata.PackageNotFoundError(name)

    monkeypatch.setattr(version_module.metadata, "version", _missing)
    monkeypatch.setattr(version_module.Path, "exists", lambda self: False)
    assert version_module.get_app_version() == "vdev"


def test_version_is_cached(monkeypatch):
    monkeypatch.setattr(version_module, "_CACHED_VERSION", "v9.9.9")
    assert version_module.get_app_version() == "v9.9.9"
