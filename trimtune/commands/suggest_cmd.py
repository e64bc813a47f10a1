"""Suggest command."""

from trimtune.commands.common import fmt_mm, open_session, print_json
from trimtune.constants import ExitCode


def run(args):
    session, error = open_session(args.csv)
    if error:
        print(error)
        return ExitCode.USAGE

    suggestions = session.compute().suggestions
    if getattr(args, "json", False):
        print_json(suggestions)
        return ExitCode.OK

    for s in suggestions:
        flag = " OUT OF TOLERANCE" if s.out_of_tol else ""
        print(f"  {s.group_name:<6} {s.side} mean {fmt_mm(s.mean_delta):>6}  {s.action} {abs(s.loops_signed)} loop(s){flag}")
    return ExitCode.OK
