import os
from enum import Enum
from pathlib import Path
from typing import List

from .errors import ConfigFileNotFoundError


APP_DIR_NAME = "metasearch"
CONFIG_DIR_ENV = "METASEARCH_CONFIG_DIR"


class FileType(Enum):
    """Files the service looks up in its configuration directories."""

    CONFIG = "config.lua"
    ALLOWLIST = "allowlist.txt"
    BLOCKLIST = "blocklist.txt"


def candidate_paths(file_type: FileType) -> List[Path]:
    """Return the lookup locations for a file, most specific first."""
    file_name = file_type.value
    candidates: List[Path] = []

    override = os.getenv(CONFIG_DIR_ENV, "").strip()
    if override:
        candidates.append(Path(override).expanduser() / file_name)

    candidates.extend([
        Path.home() / ".config" / APP_DIR_NAME / file_name,
        Path("/etc/xdg") / APP_DIR_NAME / file_name,
        Path.cwd() / APP_DIR_NAME / file_name,
    ])
    return candidates


def file_path(file_type: FileType) -> Path:
    """Resolve the first existing location of `file_type`.

    Raises:
        ConfigFileNotFoundError: when no candidate exists.
    """
    candidates = candidate_paths(file_type)
    for candidate in candidates:
        if candidate.is_file():
            return candidate

    raise ConfigFileNotFoundError(file_type.value, [str(c) for c in candidates])
