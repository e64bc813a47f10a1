"""Structural and range-overlap checks for profiles in interchange shape."""

import math

from trimtune.constants import LANES


def _as_number(value):
    if isinstance(value, bool):
        return None
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    return v if math.isfinite(v) else None


def _fmt(value):
    return str(int(value)) if float(value).is_integer() else str(value)


def _check_lane(letter, rows):
    errors = []
    if not isinstance(rows, list):
        return [f"mapping.{letter} must be a list of [min, max, group] ranges"], []

    valid = []
    for i, entry in enumerate(rows, start=1):
        where = f"mapping.{letter}[{i}]"
        if not isinstance(entry, (list, tuple)) or len(entry) != 3:
            errors.append(f"{where} must be [min, max, group]")
            continue
        lo, hi, label = entry
        lo_n = _as_number(lo)
        hi_n = _as_number(hi)
        ok = True
        if lo_n is None:
            errors.append(f"{where} min is not a number: {lo!r}")
            ok = False
        if hi_n is None:
            errors.append(f"{where} max is not a number: {hi!r}")
            ok = False
        if ok and lo_n > hi_n:
            errors.append(f"{where} min {_fmt(lo_n)} is greater than max {_fmt(hi_n)}")
            ok = False
        if not isinstance(label, str) or not label.strip():
            errors.append(f"{where} group name is empty")
            ok = False
        if ok:
            valid.append((lo_n, hi_n, label))
    return errors, valid


def _overlaps(letter, valid):
    # Order-independent, unlike lookup, which takes the first listed match.
    errors = []
    ordered = sorted(valid, key=lambda r: r[0])
    for prev, nxt in zip(ordered, ordered[1:]):
        if nxt[0] <= prev[1]:
            errors.append(
                f"mapping.{letter}: {nxt[2]} starts at {_fmt(nxt[0])} "
                f"but {prev[2]} runs to {_fmt(prev[1])} (overlap)"
            )
    return errors


def validate_profile(key, profile):
    """Return a list of problems with ``profile``; an empty list means ok."""
    errors = []
    if not isinstance(key, str) or not key.strip():
        errors.append("profile key must be a non-empty string")

    if not isinstance(profile, dict):
        errors.append("profile must be an object")
        return errors

    name = profile.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("name must be a non-empty string")

    mm = profile.get("mmPerLoop")
    if isinstance(mm, bool) or not isinstance(mm, (int, float)) or not math.isfinite(mm):
        errors.append(f"mmPerLoop must be a finite number; got {mm!r}")

    mapping = profile.get("mapping")
    if not isinstance(mapping, dict):
        errors.append("mapping must be an object keyed by lane letter")
        return errors

    for letter in LANES:
        lane_errors, valid = _check_lane(letter, mapping.get(letter))
        errors.extend(lane_errors)
        errors.extend(_overlaps(letter, valid))
    return errors


def validate_profiles(profiles):
    """Validate a whole library; returns ``{key: errors}`` for profiles with errors."""
    result = {}
    for key, profile in (profiles or {}).items():
        errors = validate_profile(key, profile)
        if errors:
            result[key] = errors
    return result
