"""Managed path layout."""

import os
from pathlib import Path


HOME_ENV = "TRIMTUNE_HOME"


def home_dir():
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home()


def data_dir():
    return home_dir() / ".local" / "share" / "trimtune"


def state_dir():
    return home_dir() / ".local" / "state" / "trimtune"


def value_file(key):
    return state_dir() / f"{key}.json"


def lock_file():
    return state_dir() / "lock"


def ensure_dirs():
    for p in [data_dir(), state_dir()]:
        p.mkdir(parents=True, exist_ok=True)
