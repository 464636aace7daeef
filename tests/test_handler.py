"""Tests for configuration file lookup."""

from pathlib import Path

import pytest

from metasearch.core.errors import ConfigFileNotFoundError
from metasearch.core.handler import FileType, candidate_paths, file_path


@pytest.fixture
def isolated_dirs(tmp_path, monkeypatch):
    """Point the home and working directories at empty temp dirs."""
    home = tmp_path / "home"
    cwd = tmp_path / "cwd"
    home.mkdir()
    cwd.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    monkeypatch.chdir(cwd)
    return home, cwd


class TestCandidatePaths:
    def test_default_order(self, isolated_dirs):
        home, cwd = isolated_dirs

        assert candidate_paths(FileType.CONFIG) == [
            home / ".config" / "metasearch" / "config.lua",
            Path("/etc/xdg/metasearch/config.lua"),
            cwd / "metasearch" / "config.lua",
        ]

    def test_env_override_comes_first(self, isolated_dirs, tmp_path, monkeypatch):
        monkeypatch.setenv("METASEARCH_CONFIG_DIR", str(tmp_path / "custom"))

        assert candidate_paths(FileType.BLOCKLIST)[0] == tmp_path / "custom" / "blocklist.txt"


class TestFilePath:
    def test_finds_user_config(self, isolated_dirs):
        home, cwd = isolated_dirs
        user_config = home / ".config" / "metasearch" / "config.lua"
        user_config.parent.mkdir(parents=True)
        user_config.write_text("threads = 1\n")
        local_config = cwd / "metasearch" / "config.lua"
        local_config.parent.mkdir(parents=True)
        local_config.write_text("threads = 2\n")

        assert file_path(FileType.CONFIG) == user_config

    def test_falls_back_to_working_directory(self, isolated_dirs):
        _, cwd = isolated_dirs
        allowlist = cwd / "metasearch" / "allowlist.txt"
        allowlist.parent.mkdir(parents=True)
        allowlist.write_text("")

        assert file_path(FileType.ALLOWLIST) == allowlist

    def test_env_override(self, isolated_dirs, tmp_path, monkeypatch):
        custom = tmp_path / "custom"
        custom.mkdir()
        (custom / "config.lua").write_text("threads = 1\n")
        monkeypatch.setenv("METASEARCH_CONFIG_DIR", str(custom))

        assert file_path(FileType.CONFIG) == custom / "config.lua"

    def test_not_found_lists_every_location(self, isolated_dirs):
        home, cwd = isolated_dirs

        with pytest.raises(ConfigFileNotFoundError) as exc_info:
            file_path(FileType.BLOCKLIST)

        tried = exc_info.value.tried
        assert str(home / ".config" / "metasearch" / "blocklist.txt") in tried
        assert str(cwd / "metasearch" / "blocklist.txt") in tried
        assert "blocklist.txt" in str(exc_info.value)
