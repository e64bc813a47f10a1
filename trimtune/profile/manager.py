"""Profile library utilities.

The library is a plain ``{key: profile}`` mapping in interchange shape
(``name``, ``mmPerLoop``, ``mapping``), which is also how it is persisted.
``parse_profile`` turns one entry into the typed model used by the engine.
"""

import copy
import logging

from trimtune.constants import DEFAULT_MM_PER_LOOP, LANES
from trimtune.core.models import Profile, Range
from trimtune.core.parser import number
from trimtune.profile.builtin import BUILTIN_PROFILES

logger = logging.getLogger(__name__)


def builtin_profiles():
    return copy.deepcopy(BUILTIN_PROFILES)


def _bound(value):
    v = number(value)
    if v is None:
        return None
    return int(v) if float(v).is_integer() else v


def parse_range(entry):
    if not isinstance(entry, (list, tuple)) or len(entry) != 3:
        return None
    lo = _bound(entry[0])
    hi = _bound(entry[1])
    label = entry[2]
    if lo is None or hi is None or lo > hi:
        return None
    if not isinstance(label, str) or not label.strip():
        return None
    return Range(min=lo, max=hi, group_name=label.strip())


def parse_profile(obj, key=""):
    """Parse one profile, falling back to defaults for anything malformed.

    Malformed range rows are skipped rather than rejected, so a profile that
    fails validation can still be used for lookups.
    """
    if not isinstance(obj, dict):
        obj = {}
    name = obj.get("name")
    if not isinstance(name, str) or not name.strip():
        name = key

    mm = number(obj.get("mmPerLoop"))
    if mm is None:
        mm = DEFAULT_MM_PER_LOOP

    raw_mapping = obj.get("mapping")
    if not isinstance(raw_mapping, dict):
        raw_mapping = {}

    mapping = {}
    for letter, rows in raw_mapping.items():
        if not isinstance(rows, list):
            continue
        ranges = []
        for entry in rows:
            rng = parse_range(entry)
            if rng is None:
                logger.debug("skipping malformed range %r in %s.%s", entry, key, letter)
                continue
            ranges.append(rng)
        mapping[str(letter).upper()] = ranges
    return Profile(name=name, mm_per_loop=mm, mapping=mapping)


def profile_to_dict(profile):
    return {
        "name": profile.name,
        "mmPerLoop": profile.mm_per_loop,
        "mapping": {
            letter: [[r.min, r.max, r.group_name] for r in ranges]
            for letter, ranges in profile.mapping.items()
        },
    }


def empty_mapping():
    return {letter: [] for letter in LANES}


def resolve_active_key(profiles, key):
    if key in (profiles or {}):
        return key
    if profiles:
        return next(iter(profiles))
    return next(iter(BUILTIN_PROFILES), "")


def active_profile(profiles, key):
    """Typed profile for ``key``; first profile, then first built-in, as fallbacks."""
    resolved = resolve_active_key(profiles, key)
    raw = (profiles or {}).get(resolved)
    if raw is None:
        raw = BUILTIN_PROFILES.get(resolved)
    return parse_profile(raw, resolved)


def normalize_draft(key, obj):
    """Normalize an edited profile before saving it under ``key``."""
    key = str(key or "").strip()
    if not key:
        raise ValueError("profile name cannot be empty")
    profile = copy.deepcopy(obj) if isinstance(obj, dict) else {}
    profile["name"] = key
    mm = number(profile.get("mmPerLoop"))
    profile["mmPerLoop"] = mm if mm is not None else DEFAULT_MM_PER_LOOP
    if not isinstance(profile.get("mapping"), dict):
        profile["mapping"] = empty_mapping()
    return key, profile


def save_draft(profiles, key, obj):
    key, profile = normalize_draft(key, obj)
    library = dict(profiles or {})
    library[key] = profile
    return library, key


def merge_profiles(current, incoming):
    """Merge an imported library; incoming entries win on name collisions."""
    merged = copy.deepcopy(current or {})
    merged.update(copy.deepcopy(incoming or {}))
    for key, profile in merged.items():
        if isinstance(profile, dict) and not profile.get("name"):
            profile["name"] = key
    return merged


def ensure_profile_for_name(profiles, name, base_key):
    """Select the profile called ``name``, cloning ``base_key`` when it does not exist.

    Returns ``(profiles, key)``.
    """
    key = str(name or "").strip()
    library = dict(profiles or {})
    if not key:
        return library, resolve_active_key(library, base_key)
    if key in library:
        return library, key

    base = library.get(resolve_active_key(library, base_key))
    if base is None:
        base = next(iter(BUILTIN_PROFILES.values()))
    clone = copy.deepcopy(base)
    clone["name"] = key
    library[key] = clone
    logger.info("created profile %r from %r", key, base_key)
    return library, key


def copy_profile(profiles, source_key, new_key):
    if source_key not in (profiles or {}):
        raise KeyError(source_key)
    return save_draft(profiles, new_key, profiles[source_key])


def delete_profile(profiles, key):
    """Remove ``key``; returns ``(profiles, next_active_key)``."""
    library = dict(profiles or {})
    library.pop(key, None)
    return library, resolve_active_key(library, None)


def reset_to_builtin():
    profiles = builtin_profiles()
    return profiles, next(iter(profiles), "")


def set_mm_per_loop(profiles, key, value):
    if key not in (profiles or {}):
        raise KeyError(key)
    mm = number(value)
    library = copy.deepcopy(profiles)
    library[key]["mmPerLoop"] = mm if mm is not None else DEFAULT_MM_PER_LOOP
    return library


def list_profiles(profiles):
    return sorted((profiles or {}).keys())
