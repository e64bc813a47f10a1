"""Persistent key/value state.

Each key is stored as its own JSON document in the state directory. A key
that is missing or fails to parse falls back to its default.
"""

import copy
import json
import logging

from trimtune.constants import DEFAULT_LOOP_TYPES, FIRST_STEP, LAST_STEP
from trimtune.profile.builtin import BUILTIN_PROFILES
from trimtune.state.paths import ensure_dirs, value_file

logger = logging.getLogger(__name__)


DEFAULTS = {
    "workflow_step": FIRST_STEP,
    "profiles": BUILTIN_PROFILES,
    "active_profile_key": next(iter(BUILTIN_PROFILES), ""),
    "group_adjustments": {},
    "loop_types": DEFAULT_LOOP_TYPES,
    "loop_setup": {},
    "group_loop_setup": {},
    "loop_presets": {},
}


def default_value(key):
    if key not in DEFAULTS:
        raise KeyError(f"unknown state key: {key}")
    return copy.deepcopy(DEFAULTS[key])


def _matches_default_type(key, value):
    default = DEFAULTS[key]
    if isinstance(default, bool) or isinstance(value, bool):
        return False
    if isinstance(default, int):
        return isinstance(value, int)
    return isinstance(value, type(default))


def clamp_step(value):
    try:
        step = int(value)
    except (TypeError, ValueError):
        return FIRST_STEP
    return min(LAST_STEP, max(FIRST_STEP, step))


def load_value(key):
    default = default_value(key)
    path = value_file(key)
    if not path.exists():
        return default
    try:
        with path.open("r") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("state %s is unreadable (%s); using default", key, exc)
        return default
    if not _matches_default_type(key, data):
        logger.warning("state %s has unexpected type %s; using default", key, type(data).__name__)
        return default
    if key == "workflow_step":
        return clamp_step(data)
    return data


def _atomic_write_json(path, payload):
    tmp = path.with_suffix(".tmp")
    with tmp.open("w") as f:
        json.dump(payload, f, indent=2)
    tmp.replace(path)


def save_value(key, value):
    default_value(key)
    ensure_dirs()
    _atomic_write_json(value_file(key), value)
    return value


def load_state():
    return {key: load_value(key) for key in DEFAULTS}
