"""Shared constants."""

from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    USAGE = 2
    RUNTIME_ERROR = 10
    INVALID_PROFILE = 30


APP_NAME = "trimtune"

LANES = ("A", "B", "C", "D")
SIDES = ("L", "R")

DEFAULT_MM_PER_LOOP = 10
WARN_MARGIN_MM = 3

STANDARD_LOOP = "SL"
DEFAULT_LOOP_TYPES = {
    "SL": 0,
    "DL": -7,
    "AS": -10,
    "AS+": -16,
    "PH": -18,
    "LF++": -23,
}

FIRST_STEP = 1
LAST_STEP = 4
