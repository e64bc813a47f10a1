"""Full recompute of states, group stats and plan from one input snapshot."""

from trimtune.constants import LANES
from trimtune.core.aggregate import compute_line_states, group_stats, symmetry
from trimtune.core.models import ComputeResult
from trimtune.core.solver import suggestions, target_plan


def compute(
    rows,
    profile,
    loop_setup,
    loop_types,
    adjustments,
    meta,
    group_loop_setup=None,
    lanes=LANES,
):
    """Pure function of its inputs; nothing is cached between calls."""
    mm_per_loop = profile.mm_per_loop if profile is not None else None
    states = compute_line_states(
        rows,
        profile,
        meta,
        loop_setup,
        loop_types,
        adjustments,
        group_loop_setup=group_loop_setup,
    )
    stats = group_stats(states)
    return ComputeResult(
        states=states,
        stats=stats,
        plan=target_plan(stats, mm_per_loop, lanes),
        suggestions=suggestions(stats, mm_per_loop, meta.tolerance),
        symmetry=symmetry(states),
    )
