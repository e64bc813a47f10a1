"""CLI entry and command wiring."""

import argparse
import logging
import sys

from trimtune.commands import (
    adjust_cmd,
    export_cmd,
    import_cmd,
    loops_cmd,
    plan_cmd,
    profile_cmd,
    status_cmd,
    step_cmd,
    suggest_cmd,
)
from trimtune.constants import APP_NAME, ExitCode, LANES
from trimtune.core.aggregate import STATE_AFTER, STATES


COMMANDS = {
    "import": import_cmd.run,
    "status": status_cmd.run,
    "plan": plan_cmd.run,
    "suggest": suggest_cmd.run,
    "adjust": adjust_cmd.run,
    "loops": loops_cmd.run,
    "profile": profile_cmd.run,
    "export": export_cmd.run,
    "step": step_cmd.run,
}


def _add_loops_parser(sub):
    p_loops = sub.add_parser("loops", help="Loop types, loop setup and presets")
    loops_sub = p_loops.add_subparsers(dest="loops_action")

    loops_sub.add_parser("show", help="Show loop types, setup and presets")

    p_set = loops_sub.add_parser("set", help="Set the loop type of a group or line")
    p_set.add_argument("target", help="Group (AR1) or line (A3)")
    p_set.add_argument("side", choices=["L", "R", "l", "r"])
    p_set.add_argument("type", help="Loop type name")
    p_set.add_argument("--csv", help="Measurement file, to resolve custom group names")

    p_type = loops_sub.add_parser("type", help="Add, change or remove a loop type")
    p_type.add_argument("name")
    p_type.add_argument("mm", nargs="?", help="Signed length change in mm")
    p_type.add_argument("--remove", action="store_true")

    p_all = loops_sub.add_parser("all-sl", help="Set every group loop to SL")
    p_all.add_argument("csv", help="Measurement file (.csv or .xlsx)")

    p_mirror = loops_sub.add_parser("mirror", help="Copy group loops from one side to the other")
    p_mirror.add_argument("csv", help="Measurement file (.csv or .xlsx)")
    p_mirror.add_argument("--from", dest="source", choices=["L", "R", "l", "r"], default="L")

    p_preset = loops_sub.add_parser("preset", help="Save, load or delete a loop preset")
    p_preset.add_argument("preset_action", choices=["save", "load", "delete"])
    p_preset.add_argument("name")


def _add_profile_parser(sub):
    p_profile = sub.add_parser("profile", help="Manage wing profiles")
    profile_sub = p_profile.add_subparsers(dest="profile_action")

    profile_sub.add_parser("list", help="List profiles")

    p_show = profile_sub.add_parser("show", help="Print a profile as JSON")
    p_show.add_argument("key", nargs="?")

    p_use = profile_sub.add_parser("use", help="Select the active profile")
    p_use.add_argument("key")

    p_validate = profile_sub.add_parser("validate", help="Check profiles for errors and overlaps")
    p_validate.add_argument("key", nargs="?")

    p_import = profile_sub.add_parser("import", help="Merge profiles from a JSON file")
    p_import.add_argument("file")

    p_export = profile_sub.add_parser("export", help="Write profiles to a JSON file")
    p_export.add_argument("file")
    p_export.add_argument("--key", help="Export only this profile")

    p_copy = profile_sub.add_parser("copy", help="Copy a profile under a new name")
    p_copy.add_argument("key")
    p_copy.add_argument("new_key")

    p_delete = profile_sub.add_parser("delete", help="Delete a profile")
    p_delete.add_argument("key")
    p_delete.add_argument("--yes", action="store_true")

    p_reset = profile_sub.add_parser("reset", help="Restore the built-in profiles")
    p_reset.add_argument("--yes", action="store_true")

    p_mm = profile_sub.add_parser("mm-per-loop", help="Set the mm per loop step of a profile")
    p_mm.add_argument("key")
    p_mm.add_argument("value")


def build_parser():
    parser = argparse.ArgumentParser(prog=APP_NAME)
    parser.add_argument("-v", "--verbose", action="count", default=0)
    sub = parser.add_subparsers(dest="command")

    p_import = sub.add_parser("import", help="Import a measurement file")
    p_import.add_argument("csv", help="Measurement file (.csv or .xlsx)")

    p_status = sub.add_parser("status", help="Show line deviations and group means")
    p_status.add_argument("csv", help="Measurement file (.csv or .xlsx)")
    p_status.add_argument("--state", choices=STATES, default=STATE_AFTER)
    p_status.add_argument("--json", action="store_true")

    p_plan = sub.add_parser("plan", help="Propose loop changes toward zero deviation")
    p_plan.add_argument("csv", help="Measurement file (.csv or .xlsx)")
    p_plan.add_argument("--lanes", default="".join(LANES), help="Lane letters to include")
    p_plan.add_argument("--apply", action="store_true", help="Add the plan to the adjustments")
    p_plan.add_argument("--yes", action="store_true")
    p_plan.add_argument("--json", action="store_true")

    p_suggest = sub.add_parser("suggest", help="Per-group shorten/lengthen suggestions")
    p_suggest.add_argument("csv", help="Measurement file (.csv or .xlsx)")
    p_suggest.add_argument("--json", action="store_true")

    p_adjust = sub.add_parser("adjust", help="Add to or reset group adjustments")
    p_adjust.add_argument("group", nargs="?")
    p_adjust.add_argument("side", nargs="?")
    p_adjust.add_argument("mm", nargs="?")
    p_adjust.add_argument("--reset", action="store_true")
    p_adjust.add_argument("--yes", action="store_true")

    _add_loops_parser(sub)
    _add_profile_parser(sub)

    p_export = sub.add_parser("export", help="Re-write a measurement file")
    p_export.add_argument("csv", help="Measurement file (.csv or .xlsx)")
    p_export.add_argument("--out", required=True, help="Output path")

    p_step = sub.add_parser("step", help="Show or set the workflow step")
    p_step.add_argument("step", nargs="?", type=int)

    return parser


def configure_logging(verbosity):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return ExitCode.USAGE

    try:
        return COMMANDS[args.command](args)
    except OSError as exc:
        print(f"error: {exc}")
        return ExitCode.RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
