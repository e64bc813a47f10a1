"""Profile library interchange (JSON)."""

import json


class ProfileFormatError(ValueError):
    """Raised when a profile document is not a ``{key: profile}`` object."""


def read_profiles_json(text):
    try:
        obj = json.loads(text)
    except ValueError as exc:
        raise ProfileFormatError(f"profiles file is not valid JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise ProfileFormatError("profiles JSON must be an object of { profileName: { ... } }")
    return obj


def read_profiles_file(path):
    with open(path, "r", encoding="utf-8") as f:
        return read_profiles_json(f.read())


def export_profiles(profiles, outpath, keys=None):
    if keys is not None:
        missing = [k for k in keys if k not in profiles]
        if missing:
            raise KeyError(", ".join(missing))
        profiles = {k: profiles[k] for k in keys}
    with open(outpath, "w", encoding="utf-8") as f:
        json.dump(profiles, f, indent=2)
        f.write("\n")
    return profiles
