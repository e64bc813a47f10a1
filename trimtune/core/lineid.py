"""Suspension line label parsing."""

import re

from trimtune.core.models import LineId


LINE_RE = re.compile(r"^([A-Za-z])\s*0*([0-9]+)$")


def parse_line_id(text):
    """Parse a label like ``A1``, ``b 12`` or ``C03`` into a LineId.

    Returns None for anything that is not a single letter followed by digits.
    """
    if text is None:
        return None
    m = LINE_RE.match(str(text).strip())
    if not m:
        return None
    return LineId(prefix=m.group(1).upper(), num=int(m.group(2)))


def line_sort_key(label):
    parsed = parse_line_id(label)
    if parsed is None:
        return (str(label), 0)
    return (parsed.prefix, parsed.num)
