"""Status command: per-line deviations, group means and symmetry."""

from dataclasses import asdict
import json

from trimtune.commands.common import fmt_mm, open_session
from trimtune.constants import ExitCode, LANES


def _symmetry_line(symmetry):
    parts = [f"{lane} {fmt_mm(symmetry.get(lane), signed=False)}" for lane in LANES]
    parts.append(f"overall {fmt_mm(symmetry.get('overall'), signed=False)}")
    return ", ".join(parts)


def run(args):
    session, error = open_session(args.csv)
    if error:
        print(error)
        return ExitCode.USAGE

    result = session.compute()
    which = args.state

    if getattr(args, "json", False):
        payload = {
            "profile": session.profile_key(),
            "meta": asdict(session.meta),
            "states": [asdict(s) for s in result.states],
            "stats": [asdict(s) for s in result.stats],
            "symmetry": result.symmetry,
        }
        print(json.dumps(payload, indent=2))
        return ExitCode.OK

    print(f"trimtune status ({which}), profile {session.profile_key()}")
    print(f"tolerance {session.meta.tolerance} mm, correction {session.meta.correction} mm")
    for state in result.states:
        dev = getattr(state, which)
        print(
            f"  {state.line:>5} {state.side} {state.group_name:<6}"
            f" loop {fmt_mm(state.loop_delta):>5}"
            f" adj {fmt_mm(state.adjustment):>5}"
            f" Δ {fmt_mm(dev.delta):>6} {dev.severity}"
        )
    print("group means (after):")
    for stat in result.stats:
        print(f"  {stat.group_name:<6} {stat.side} {fmt_mm(stat.mean_delta)}")
    print(f"symmetry |L-R|: {_symmetry_line(result.symmetry)}")
    return ExitCode.OK
