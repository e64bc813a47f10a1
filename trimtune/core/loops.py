"""Maillon loop model.

A loop type shortens or lengthens the effective line length by a fixed
amount. The configured delta is added to the raw measured length before any
deviation is computed.

Loop types are looked up per ``<group>|<side>`` first (group loop setup),
then per ``<line>|<side>`` (line loop setup). Anything not configured is the
standard loop ``SL``; a type missing from the type table counts as 0 mm.
"""

import copy

from trimtune.constants import SIDES, STANDARD_LOOP
from trimtune.core.deviation import is_finite


def setup_key(name, side):
    return f"{name}|{side}"


def loop_type_delta(loop_types, type_name):
    value = (loop_types or {}).get(type_name)
    if is_finite(value):
        return value
    return 0


def loop_type_for(label, side, loop_setup, group_name=None, group_loop_setup=None):
    if group_name and group_loop_setup:
        type_name = group_loop_setup.get(setup_key(group_name, side))
        if type_name:
            return type_name
    return (loop_setup or {}).get(setup_key(label, side)) or STANDARD_LOOP


def loop_delta_for(label, side, loop_setup, loop_types, group_name=None, group_loop_setup=None):
    type_name = loop_type_for(label, side, loop_setup, group_name, group_loop_setup)
    return loop_type_delta(loop_types, type_name)


def set_loop_type(loop_types, name, mm):
    """Return a new loop type table with ``name`` set to ``mm`` (non-numbers become 0)."""
    name = str(name or "").strip()
    if not name:
        raise ValueError("loop type name cannot be empty")
    table = dict(loop_types or {})
    if not is_finite(mm):
        mm = 0
    table[name] = mm
    return table


def remove_loop_type(loop_types, name):
    if name == STANDARD_LOOP:
        raise ValueError(f"the standard loop type {STANDARD_LOOP} cannot be removed")
    table = dict(loop_types or {})
    table.pop(name, None)
    return table


def assign(setup, name, side, type_name):
    if side not in SIDES:
        raise ValueError(f"side must be one of {', '.join(SIDES)}; got {side!r}")
    table = dict(setup or {})
    table[setup_key(name, side)] = type_name
    return table


def all_standard(group_names):
    table = {}
    for group in group_names:
        for side in SIDES:
            table[setup_key(group, side)] = STANDARD_LOOP
    return table


def mirror(setup, group_names, source="L"):
    """Copy every group's loop type from the ``source`` side onto the other side."""
    if source not in SIDES:
        raise ValueError(f"side must be one of {', '.join(SIDES)}; got {source!r}")
    target = "R" if source == "L" else "L"
    table = dict(setup or {})
    for group in group_names:
        table[setup_key(group, target)] = table.get(setup_key(group, source)) or STANDARD_LOOP
    return table


def save_preset(presets, name, loop_setup, group_loop_setup):
    name = str(name or "").strip()
    if not name:
        raise ValueError("preset name cannot be empty")
    table = dict(presets or {})
    table[name] = {
        "loop_setup": copy.deepcopy(loop_setup or {}),
        "group_loop_setup": copy.deepcopy(group_loop_setup or {}),
    }
    return table


def load_preset(presets, name):
    """Return ``(loop_setup, group_loop_setup)`` stored under ``name``."""
    preset = (presets or {}).get(name)
    if not isinstance(preset, dict):
        raise KeyError(name)
    loop_setup = preset.get("loop_setup")
    group_loop_setup = preset.get("group_loop_setup")
    return (
        dict(loop_setup) if isinstance(loop_setup, dict) else {},
        dict(group_loop_setup) if isinstance(group_loop_setup, dict) else {},
    )


def delete_preset(presets, name):
    table = dict(presets or {})
    table.pop(name, None)
    return table
