"""Target plan solver.

Turns per-group/side mean deviations into whole loop steps that move each
mean toward zero.
"""

import logging

from trimtune.constants import DEFAULT_MM_PER_LOOP, LANES
from trimtune.core.adjustments import accumulate, adjustment_key
from trimtune.core.deviation import is_finite, round_half_away
from trimtune.core.mapping import group_lane
from trimtune.core.models import Suggestion, TargetProposal

logger = logging.getLogger(__name__)


ACTION_SHORTEN = "Shorten"
ACTION_LENGTHEN = "Lengthen"
ACTION_NONE = "No change"


def effective_mm_per_loop(mm_per_loop):
    if is_finite(mm_per_loop) and mm_per_loop > 0:
        return mm_per_loop
    return DEFAULT_MM_PER_LOOP


def lane_included(group_name, lanes):
    lane = group_lane(group_name)
    if lane is None:
        return True
    return lane in lanes


def target_plan(stats, mm_per_loop, lanes=LANES):
    """Propose signed loop steps per group/side, worst mean first.

    Groups whose lane letter is not in ``lanes`` are skipped; groups without
    a lane letter are always considered. Entries needing zero steps are left
    out.
    """
    step = effective_mm_per_loop(mm_per_loop)
    lanes = {str(lane).upper() for lane in lanes}
    plan = []
    for stat in stats:
        if not lane_included(stat.group_name, lanes):
            continue
        if not is_finite(stat.mean_delta):
            continue
        loops = -round_half_away(stat.mean_delta / step)
        if loops == 0:
            continue
        extra = loops * step
        plan.append(
            TargetProposal(
                group_name=stat.group_name,
                side=stat.side,
                current_mean=stat.mean_delta,
                mm_per_loop=step,
                loops_to_apply_signed=loops,
                extra_mm=extra,
                predicted_mean=stat.mean_delta + extra,
            )
        )
    plan.sort(key=lambda p: abs(p.current_mean), reverse=True)
    return plan


def apply_plan(adjustments, plan):
    """Add every proposal's extra mm onto the adjustment table."""
    table = dict(adjustments or {})
    for proposal in plan:
        key = adjustment_key(proposal.group_name, proposal.side)
        table = accumulate(table, key, proposal.extra_mm)
        logger.info("adjusted %s by %+g mm (now %g)", key, proposal.extra_mm, table[key])
    return table


def action_for(loops_signed):
    if loops_signed > 0:
        return ACTION_SHORTEN
    if loops_signed < 0:
        return ACTION_LENGTHEN
    return ACTION_NONE


def suggestions(stats, mm_per_loop, tolerance):
    step = effective_mm_per_loop(mm_per_loop)
    tol = tolerance or 0
    out = []
    for stat in stats:
        loops = round_half_away(stat.mean_delta / step)
        out.append(
            Suggestion(
                group_name=stat.group_name,
                side=stat.side,
                mean_delta=stat.mean_delta,
                loops_signed=loops,
                action=action_for(loops),
                out_of_tol=tol > 0 and abs(stat.mean_delta) >= tol,
            )
        )
    return out
