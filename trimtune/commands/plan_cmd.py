"""Plan command: loop steps that bring group means toward zero."""

from trimtune.commands.common import fmt_mm, open_session, print_json, require_yes
from trimtune.constants import ExitCode, LANES
from trimtune.state.locks import state_lock


def parse_lanes(text):
    lanes = [c for c in str(text or "").upper() if c.strip() and c != ","]
    unknown = [c for c in lanes if c not in LANES]
    if unknown:
        raise ValueError(f"unknown lane letter(s): {''.join(unknown)}")
    return tuple(lanes)


def run(args):
    try:
        lanes = parse_lanes(args.lanes)
    except ValueError as exc:
        print(f"error: {exc}")
        return ExitCode.USAGE

    session, error = open_session(args.csv)
    if error:
        print(error)
        return ExitCode.USAGE

    plan = session.compute(lanes=lanes).plan

    if getattr(args, "json", False):
        print_json(plan)
    elif not plan:
        print("No loop changes needed.")
    else:
        print(f"Target plan ({session.profile().mm_per_loop:g} mm per loop):")
        for p in plan:
            print(
                f"  {p.group_name:<6} {p.side} mean {fmt_mm(p.current_mean):>6}"
                f"  loops {p.loops_to_apply_signed:+d} ({fmt_mm(p.extra_mm)} mm)"
                f"  -> {fmt_mm(p.predicted_mean)}"
            )

    if not args.apply or not plan:
        return ExitCode.OK
    if not require_yes(args, f"Apply {len(plan)} adjustment(s)?"):
        print("aborted")
        return ExitCode.OK

    with state_lock():
        session.apply_plan(plan)
    print(f"Applied {len(plan)} adjustment(s).")
    return ExitCode.OK
