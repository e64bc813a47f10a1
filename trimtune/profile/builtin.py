"""Built-in wing profiles, in the profile interchange shape."""


def _lane(letter, bounds):
    return [[lo, hi, f"{letter}R{i}"] for i, (lo, hi) in enumerate(bounds, start=1)]


FOUR_PER_GROUP = [(1, 4), (5, 8), (9, 12), (13, 16)]
THREE_PER_GROUP = [(1, 3), (4, 6), (7, 9), (10, 12)]


BUILTIN_PROFILES = {
    "Generic 4-row": {
        "name": "Generic 4-row",
        "mmPerLoop": 10,
        "mapping": {
            "A": _lane("A", FOUR_PER_GROUP),
            "B": _lane("B", FOUR_PER_GROUP),
            "C": _lane("C", FOUR_PER_GROUP),
            "D": _lane("D", FOUR_PER_GROUP),
        },
    },
    "Generic 3-liner": {
        "name": "Generic 3-liner",
        "mmPerLoop": 10,
        "mapping": {
            "A": _lane("A", THREE_PER_GROUP),
            "B": _lane("B", THREE_PER_GROUP),
            "C": _lane("C", THREE_PER_GROUP),
            "D": [],
        },
    },
}
