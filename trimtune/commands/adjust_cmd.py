"""Adjust command: accumulate or reset group/side adjustments."""

from trimtune.commands.common import fmt_mm, open_session, require_yes
from trimtune.constants import ExitCode
from trimtune.core.adjustments import adjustment_key
from trimtune.core.parser import number
from trimtune.state.locks import state_lock


def _show(table):
    if not table:
        print("No adjustments.")
        return
    for key in sorted(table):
        print(f"  {key}: {fmt_mm(table[key])} mm")


def run(args):
    session, _ = open_session()

    if args.reset:
        if not require_yes(args, "Reset all adjustments?"):
            print("aborted")
            return ExitCode.OK
        with state_lock():
            session.reset_adjustments()
        print("Adjustments reset.")
        return ExitCode.OK

    if not args.group:
        _show(session.adjustments.get())
        return ExitCode.OK

    side = (args.side or "").upper()
    mm = number(args.mm)
    if side not in ("L", "R") or mm is None:
        print("error: usage: adjust GROUP L|R MM")
        return ExitCode.USAGE

    with state_lock():
        table = session.accumulate(args.group, side, mm)
    key = adjustment_key(args.group, side)
    print(f"{key}: {fmt_mm(table[key])} mm")
    return ExitCode.OK
