import pytest

from tests.factories import render_lua


@pytest.fixture
def write_config(tmp_path):
    """Write a config script built from keyword overrides and return its path."""

    def _write(text=None, name="config.lua", **overrides):
        path = tmp_path / name
        path.write_text(text if text is not None else render_lua(**overrides), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in ("METASEARCH_CONFIG_DIR", "METASEARCH_FEATURES", "PKG_ENV"):
        monkeypatch.delenv(name, raising=False)
