"""Per-line deviation states and per-group aggregation.

Every line/side gets three deviation states:

  original  raw measured length, no adjustment
  loops     measured length plus the configured loop delta (the real
            "before trimming" baseline)
  after     loops state plus the group/side adjustment

Only the after state is aggregated into group means.
"""

from trimtune.constants import LANES, SIDES
from trimtune.core.adjustments import adjustment_for
from trimtune.core.deviation import deviation, is_finite
from trimtune.core.lineid import parse_line_id
from trimtune.core.loops import loop_delta_for
from trimtune.core.mapping import group_for_line, group_sort_key
from trimtune.core.models import GroupStat, LineState


STATE_ORIGINAL = "original"
STATE_LOOPS = "loops"
STATE_AFTER = "after"
STATES = (STATE_ORIGINAL, STATE_LOOPS, STATE_AFTER)

SERIES_MODES = ("L", "R", "avg")


def unmapped_group(lane):
    return f"{lane}?"


def mean(values):
    finite = [v for v in values if is_finite(v)]
    if not finite:
        return None
    return sum(finite) / len(finite)


def compute_line_states(
    rows,
    profile,
    meta,
    loop_setup,
    loop_types,
    adjustments,
    group_loop_setup=None,
):
    """Compute the three deviation states for every line block and side."""
    correction = meta.correction or 0
    tolerance = meta.tolerance or 0
    states = []

    for row in rows or []:
        for lane in LANES:
            block = row.block(lane)
            if block is None or not block.line or block.nominal is None:
                continue

            parsed = parse_line_id(block.line)
            mapped = group_for_line(profile, block.line)
            group_name = mapped or unmapped_group(lane)

            for side in SIDES:
                measured = block.measured(side)
                loop = loop_delta_for(
                    block.line,
                    side,
                    loop_setup,
                    loop_types,
                    group_name=mapped,
                    group_loop_setup=group_loop_setup,
                )
                adjustment = adjustment_for(adjustments, group_name, side)
                effective = None if measured is None else measured + loop

                states.append(
                    LineState(
                        line=block.line,
                        lane=parsed.prefix if parsed else lane,
                        num=parsed.num if parsed else None,
                        group_name=group_name,
                        side=side,
                        loop_delta=loop,
                        adjustment=adjustment,
                        original=deviation(block.nominal, measured, correction, 0, tolerance),
                        loops=deviation(block.nominal, effective, correction, 0, tolerance),
                        after=deviation(block.nominal, effective, correction, adjustment, tolerance),
                    )
                )
    return states


def group_stats(states):
    """Mean after-state deviation per group/side.

    Groups/sides without a single finite sample produce no entry.
    """
    buckets = {}
    for state in states:
        if not is_finite(state.after.delta):
            continue
        buckets.setdefault((state.group_name, state.side), []).append(state.after.delta)

    stats = []
    for (group_name, side), values in buckets.items():
        value = mean(values)
        if value is None:
            continue
        stats.append(GroupStat(group_name=group_name, side=side, mean_delta=value))
    stats.sort(key=lambda s: (group_sort_key(s.group_name), s.side))
    return stats


def _by_line(states, which):
    lines = {}
    for state in states:
        entry = lines.setdefault((state.lane, state.num, state.line), {})
        entry[state.side] = getattr(state, which).delta
    return lines


def series(states, mode="avg", which=STATE_AFTER):
    """Chart series per lane letter, ordered by ascending line number.

    Each entry is ``(label, value)`` where value is the left value, the right
    value or the average of both depending on ``mode``. When averaging and
    only one side has data, that side is used; lines without data are left out.
    """
    if mode not in SERIES_MODES:
        raise ValueError(f"mode must be one of {', '.join(SERIES_MODES)}; got {mode!r}")
    if which not in STATES:
        raise ValueError(f"state must be one of {', '.join(STATES)}; got {which!r}")

    out = {lane: [] for lane in LANES}
    for (lane, num, label), sides in _by_line(states, which).items():
        left = sides.get("L")
        right = sides.get("R")
        if mode == "L":
            value = left if is_finite(left) else None
        elif mode == "R":
            value = right if is_finite(right) else None
        else:
            value = mean([left, right])
        if value is None:
            continue
        out.setdefault(lane, []).append((num if num is not None else 0, label, value))

    return {
        lane: [(label, value) for _num, label, value in sorted(entries, key=lambda e: e[0])]
        for lane, entries in out.items()
    }


def symmetry(states):
    """Mean absolute left/right difference of the after state, per lane and overall."""
    diffs = {lane: [] for lane in LANES}
    for (lane, _num, _label), sides in _by_line(states, STATE_AFTER).items():
        left = sides.get("L")
        right = sides.get("R")
        if is_finite(left) and is_finite(right):
            diffs.setdefault(lane, []).append(abs(left - right))

    out = {lane: mean(values) for lane, values in diffs.items()}
    out["overall"] = mean([d for values in diffs.values() for d in values])
    return out
