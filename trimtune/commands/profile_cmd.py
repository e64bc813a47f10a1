"""Profile command: manage the wing profile library."""

import json

from trimtune.commands.common import ensure_existing_file, open_session, require_yes
from trimtune.constants import ExitCode
from trimtune.exporters.profile_exporter import ProfileFormatError, export_profiles, read_profiles_file
from trimtune.profile import manager
from trimtune.profile.validator import validate_profile, validate_profiles
from trimtune.state.locks import state_lock


def _list(session, args):
    active = session.profile_key()
    for key in manager.list_profiles(session.profiles.get()):
        marker = "*" if key == active else " "
        print(f"{marker} {key}")
    return ExitCode.OK


def _show(session, args):
    key = args.key or session.profile_key()
    profile = session.profiles.get().get(key)
    if profile is None:
        print(f"error: no such profile: {key}")
        return ExitCode.USAGE
    print(json.dumps({key: profile}, indent=2))
    return ExitCode.OK


def _use(session, args):
    try:
        session.use_profile(args.key)
    except KeyError:
        print(f"error: no such profile: {args.key}")
        return ExitCode.USAGE
    print(f"active profile: {args.key}")
    return ExitCode.OK


def _validate(session, args):
    profiles = session.profiles.get()
    if args.key:
        if args.key not in profiles:
            print(f"error: no such profile: {args.key}")
            return ExitCode.USAGE
        problems = {}
        errors = validate_profile(args.key, profiles[args.key])
        if errors:
            problems[args.key] = errors
    else:
        problems = validate_profiles(profiles)

    if not problems:
        print("ok")
        return ExitCode.OK
    for key, errors in problems.items():
        print(f"{key}:")
        for err in errors:
            print(f"  - {err}")
    return ExitCode.INVALID_PROFILE


def _import(session, args):
    path = ensure_existing_file(args.file)
    if path is None:
        print(f"error: file not found: {args.file}")
        return ExitCode.USAGE
    try:
        incoming = read_profiles_file(path)
    except ProfileFormatError as exc:
        print(f"error: {exc}")
        return ExitCode.USAGE

    session.profiles.replace(manager.merge_profiles(session.profiles.get(), incoming))
    if len(incoming) == 1:
        session.use_profile(next(iter(incoming)))
    print(f"Imported {len(incoming)} profile(s).")
    for key, errors in validate_profiles(incoming).items():
        print(f"warning: {key}: {len(errors)} problem(s); run `trimtune profile validate {key}`")
    return ExitCode.OK


def _export(session, args):
    keys = [args.key] if args.key else None
    try:
        exported = export_profiles(session.profiles.get(), args.file, keys=keys)
    except KeyError as exc:
        print(f"error: no such profile: {exc}")
        return ExitCode.USAGE
    print(f"Exported {len(exported)} profile(s) to {args.file}")
    return ExitCode.OK


def _copy(session, args):
    try:
        profiles, key = manager.copy_profile(session.profiles.get(), args.key, args.new_key)
    except KeyError:
        print(f"error: no such profile: {args.key}")
        return ExitCode.USAGE
    session.profiles.replace(profiles)
    session.use_profile(key)
    print(f"created profile {key}")
    return ExitCode.OK


def _delete(session, args):
    if args.key not in session.profiles.get():
        print(f"error: no such profile: {args.key}")
        return ExitCode.USAGE
    if not require_yes(args, f'Delete profile "{args.key}"? This cannot be undone.'):
        print("aborted")
        return ExitCode.OK
    profiles, next_key = manager.delete_profile(session.profiles.get(), args.key)
    session.profiles.replace(profiles)
    session.active_profile_key.replace(next_key)
    print(f"deleted {args.key}; active profile: {session.profile_key()}")
    return ExitCode.OK


def _reset(session, args):
    if not require_yes(args, "Replace all profiles with the built-in set?"):
        print("aborted")
        return ExitCode.OK
    profiles, key = manager.reset_to_builtin()
    session.profiles.replace(profiles)
    session.active_profile_key.replace(key)
    print("Profiles reset to built-in set.")
    return ExitCode.OK


def _mm_per_loop(session, args):
    try:
        profiles = manager.set_mm_per_loop(session.profiles.get(), args.key, args.value)
    except KeyError:
        print(f"error: no such profile: {args.key}")
        return ExitCode.USAGE
    session.profiles.replace(profiles)
    print(f"{args.key}: {profiles[args.key]['mmPerLoop']:g} mm per loop")
    return ExitCode.OK


ACTIONS = {
    "list": _list,
    "show": _show,
    "use": _use,
    "validate": _validate,
    "import": _import,
    "export": _export,
    "copy": _copy,
    "delete": _delete,
    "reset": _reset,
    "mm-per-loop": _mm_per_loop,
}
READ_ONLY = {"list", "show", "validate", "export"}


def run(args):
    action = getattr(args, "profile_action", None) or "list"
    session, _ = open_session()
    handler = ACTIONS[action]
    if action in READ_ONLY:
        return handler(session, args)
    with state_lock():
        try:
            return handler(session, args)
        except ValueError as exc:
            print(f"error: {exc}")
            return ExitCode.USAGE
