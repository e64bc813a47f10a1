"""Loops command: loop types, loop setup, bulk tools and presets."""

from trimtune.commands.common import open_session
from trimtune.constants import ExitCode
from trimtune.core import loops
from trimtune.core.mapping import group_lane
from trimtune.core.parser import number
from trimtune.state.locks import state_lock


def _show(session):
    print("loop types:")
    for name, mm in session.loop_types.get().items():
        print(f"  {name}: {mm:+g} mm")
    for title, table in (("group loops", session.group_loop_setup.get()), ("line loops", session.loop_setup.get())):
        print(f"{title}:")
        for key in sorted(table):
            print(f"  {key}: {table[key]}")
    presets = session.loop_presets.get()
    print(f"presets: {', '.join(sorted(presets)) or '(none)'}")


def _set(session, args):
    side = args.side.upper()
    if args.type not in session.loop_types.get():
        print(f"error: unknown loop type: {args.type}")
        return ExitCode.USAGE
    if group_lane(args.target) is not None or args.target in session.group_names():
        session.set_group_loop(args.target, side, args.type)
    else:
        session.set_line_loop(args.target, side, args.type)
    print(f"{args.target}|{side}: {args.type}")
    return ExitCode.OK


def _type(session, args):
    if args.remove:
        session.loop_types.replace(loops.remove_loop_type(session.loop_types.get(), args.name))
        print(f"removed loop type {args.name}")
        return ExitCode.OK
    mm = number(args.mm)
    if mm is None:
        print("error: usage: loops type NAME MM (or --remove)")
        return ExitCode.USAGE
    table = session.loop_types.replace(loops.set_loop_type(session.loop_types.get(), args.name, mm))
    print(f"{args.name}: {table[args.name]:+g} mm")
    return ExitCode.OK


def _preset(session, args):
    if args.preset_action == "save":
        session.save_preset(args.name)
    elif args.preset_action == "load":
        try:
            session.load_preset(args.name)
        except KeyError:
            print(f"error: no such preset: {args.name}")
            return ExitCode.USAGE
    else:
        session.delete_preset(args.name)
    print(f"preset {args.name}: {args.preset_action}")
    return ExitCode.OK


def run(args):
    action = getattr(args, "loops_action", None) or "show"
    session, error = open_session(getattr(args, "csv", None))
    if error:
        print(error)
        return ExitCode.USAGE

    if action == "show":
        _show(session)
        return ExitCode.OK

    with state_lock():
        try:
            if action == "set":
                return _set(session, args)
            if action == "type":
                return _type(session, args)
            if action == "preset":
                return _preset(session, args)
            if action == "all-sl":
                session.all_standard_loops()
                print("All group loops set to SL.")
            elif action == "mirror":
                session.mirror_loops(args.source.upper())
                print(f"Group loops mirrored from {args.source.upper()}.")
        except ValueError as exc:
            print(f"error: {exc}")
            return ExitCode.USAGE
    return ExitCode.OK
