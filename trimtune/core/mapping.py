"""Line to group resolution through a profile's range table."""

import re

from trimtune.constants import LANES
from trimtune.core.lineid import line_sort_key, parse_line_id


GROUP_RE = re.compile(r"^([A-D])R(\d+)$", re.IGNORECASE)


def group_for_line(profile, label):
    """Return the group name for a line label, or None when unmapped.

    Ranges are scanned in stored order and the first one containing the line
    number wins, so overlapping ranges resolve to whichever is listed first.
    """
    parsed = parse_line_id(label)
    if parsed is None or profile is None:
        return None
    ranges = profile.mapping.get(parsed.prefix)
    if not ranges:
        return None
    for rng in ranges:
        if rng.contains(parsed.num):
            return rng.group_name
    return None


def group_lane(group_name):
    """Lane letter of a ``<Letter>R<number>`` group name, else None."""
    m = GROUP_RE.match(str(group_name))
    if not m:
        return None
    return m.group(1).upper()


def group_sort_key(group_name):
    m = GROUP_RE.match(str(group_name))
    if m:
        return f"{m.group(1).upper()}-{int(m.group(2)):02d}"
    return str(group_name)


def extract_group_names(rows, profile):
    """Distinct group names resolved from the rows, sorted by lane and number.

    Falls back to every group declared in the profile when no row resolves.
    """
    names = set()
    for row in rows or []:
        for lane in LANES:
            block = row.block(lane)
            if block is None or not block.line:
                continue
            group = group_for_line(profile, block.line)
            if group:
                names.add(group)

    if not names and profile is not None:
        for ranges in profile.mapping.values():
            for rng in ranges:
                names.add(rng.group_name)

    return sorted(names, key=group_sort_key)


def all_lines(rows):
    """Distinct line labels in the rows as ``(label, lane)`` pairs, lane/number ordered."""
    seen = set()
    out = []
    for row in rows or []:
        for lane in LANES:
            block = row.block(lane)
            if block is None or not block.line or block.line in seen:
                continue
            seen.add(block.line)
            out.append((block.line, lane))

    def key(item):
        label, lane = item
        parsed = parse_line_id(label)
        if parsed is None:
            return (lane, 0)
        return (parsed.prefix, parsed.num)

    out.sort(key=key)
    return out


def group_to_lines(rows, profile):
    mapping = {}
    for label, _lane in all_lines(rows):
        group = group_for_line(profile, label)
        if not group:
            continue
        mapping.setdefault(group, []).append(label)
    for labels in mapping.values():
        labels.sort(key=line_sort_key)
    return mapping
