"""Per group/side cumulative trim adjustments."""

from trimtune.constants import SIDES
from trimtune.core.deviation import is_finite


def adjustment_key(group_name, side):
    return f"{group_name}|{side}"


def adjustment_for(adjustments, group_name, side):
    value = (adjustments or {}).get(adjustment_key(group_name, side))
    return value if is_finite(value) else 0


def accumulate(adjustments, key, delta):
    """Return a new table with ``delta`` added to the entry under ``key``.

    Repeated calls sum; an existing value is never overwritten.
    """
    if not is_finite(delta):
        raise ValueError(f"adjustment must be a finite number; got {delta!r}")
    table = dict(adjustments or {})
    current = table.get(key)
    table[key] = (current if is_finite(current) else 0) + delta
    return table


def accumulate_group(adjustments, group_name, side, delta):
    if side not in SIDES:
        raise ValueError(f"side must be one of {', '.join(SIDES)}; got {side!r}")
    return accumulate(adjustments, adjustment_key(group_name, side), delta)
