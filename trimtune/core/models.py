"""Shared data models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LineId:
    prefix: str
    num: int


@dataclass(frozen=True)
class Range:
    min: int
    max: int
    group_name: str

    def contains(self, num):
        return self.min <= num <= self.max


@dataclass
class Profile:
    name: str
    mm_per_loop: float
    mapping: dict[str, list[Range]] = field(default_factory=dict)


@dataclass
class LineBlock:
    line: str
    nominal: float | None
    meas_l: float | None
    meas_r: float | None

    def measured(self, side):
        return self.meas_l if side == "L" else self.meas_r


@dataclass
class MeasurementRow:
    blocks: dict[str, LineBlock] = field(default_factory=dict)

    def block(self, lane):
        return self.blocks.get(lane)

    def is_empty(self):
        return not any(self.blocks.values())


@dataclass
class SessionMeta:
    input1: str = ""
    input2: str = ""
    tolerance: float = 0
    correction: float = 0


@dataclass(frozen=True)
class DeviationResult:
    delta: float | None
    severity: str


@dataclass
class LineState:
    line: str
    lane: str
    num: int | None
    group_name: str
    side: str
    loop_delta: float
    adjustment: float
    original: DeviationResult
    loops: DeviationResult
    after: DeviationResult


@dataclass(frozen=True)
class GroupStat:
    group_name: str
    side: str
    mean_delta: float


@dataclass(frozen=True)
class TargetProposal:
    group_name: str
    side: str
    current_mean: float
    mm_per_loop: float
    loops_to_apply_signed: int
    extra_mm: float
    predicted_mean: float


@dataclass(frozen=True)
class Suggestion:
    group_name: str
    side: str
    mean_delta: float
    loops_signed: int
    action: str
    out_of_tol: bool


@dataclass
class ComputeResult:
    states: list[LineState]
    stats: list[GroupStat]
    plan: list[TargetProposal]
    suggestions: list[Suggestion]
    symmetry: dict[str, float | None]
