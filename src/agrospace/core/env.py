"""
Data-directory + `.env` helpers.

Settings name the KML documents with paths such as `data/coord/fields.kml`.
Relative paths resolve against the data root: the nearest directory (from the
working directory, then from this package) that holds `data/coord/`, unless
`AGROSPACE_DATA_ROOT` points somewhere else.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

KML_DATA_DIR = Path("data") / "coord"


def _find_data_root(start: Path) -> Path | None:
    start = start.resolve()
    for candidate in (start, *start.parents):
        if (candidate / KML_DATA_DIR).is_dir():
            return candidate
    return None


@lru_cache
def get_data_root() -> Path:
    """Return the directory relative KML paths resolve against (cached)."""
    override = os.getenv("AGROSPACE_DATA_ROOT")
    if override:
        return Path(override).expanduser().resolve()
    return _find_data_root(Path.cwd()) or _find_data_root(Path(__file__).parent) or Path.cwd().resolve()


@lru_cache
def load_dotenv_if_present() -> str | None:
    """Load the nearest `.env` above the working directory, once; never overrides set vars."""
    env_path = find_dotenv(usecwd=True)
    if not env_path:
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_data_path(path: str | Path) -> Path:
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (get_data_root() / p).resolve()
