# src/multiflow/domain/grading.py
from __future__ import annotations

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field


class Grade(str, Enum):
    """
    Letter grade shown on deal badges.

    Ordered A > B > C > D/F so grades from either calculator can be compared
    and sorted directly.
    """

    A = "A"
    B = "B"
    C = "C"
    D_OR_F = "D/F"

    @property
    def rank(self) -> int:
        return _GRADE_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Grade):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Grade):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Grade):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Grade):
            return NotImplemented
        return self.rank >= other.rank


_GRADE_RANK = {
    Grade.A: 3,
    Grade.B: 2,
    Grade.C: 1,
    Grade.D_OR_F: 0,
}


class ScoredMetric(str, Enum):
    """The five metrics a grade profile weights."""

    CASH_ON_CASH = "cash_on_cash"
    DCR = "dcr"
    CAP_RATE = "cap_rate"
    CASH_FLOW = "cash_flow"
    EQUITY_GAIN = "equity_gain"


class GradeProfile(BaseModel):
    """
    User-configurable weights for the composite grade.

    Field names match the grade-profile store's columns so records decode as-is.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str | None = None
    user_id: str | None = None
    name: str

    weight_cash_on_cash: float = Field(0.0, ge=0.0)
    weight_dcr: float = Field(0.0, ge=0.0)
    weight_cap_rate: float = Field(0.0, ge=0.0)
    weight_cash_flow: float = Field(0.0, ge=0.0)
    weight_equity_gain: float = Field(0.0, ge=0.0)

    color_hex: str = "#FFDD00FF"

    @classmethod
    def default_profile(cls) -> "GradeProfile":
        return cls(
            name="Balanced",
            weight_cash_on_cash=30,
            weight_dcr=25,
            weight_cap_rate=20,
            weight_cash_flow=15,
            weight_equity_gain=10,
            color_hex="#FFDD00FF",
        )

    def raw_weights(self) -> dict[ScoredMetric, float]:
        return {
            ScoredMetric.CASH_ON_CASH: self.weight_cash_on_cash,
            ScoredMetric.DCR: self.weight_dcr,
            ScoredMetric.CAP_RATE: self.weight_cap_rate,
            ScoredMetric.CASH_FLOW: self.weight_cash_flow,
            ScoredMetric.EQUITY_GAIN: self.weight_equity_gain,
        }

    def normalized_weights(self) -> dict[ScoredMetric, float]:
        """
        Each weight divided by the sum of all five.

        The denominator falls back to 1 when the sum is not positive, so an
        all-zero profile yields all-zero weights instead of dividing by zero.
        """
        raw = self.raw_weights()
        total = sum(raw.values())
        denom = total if total > 0 else 1.0
        return {metric: weight / denom for metric, weight in raw.items()}


def effective_profile(
    profiles: Iterable[GradeProfile],
    default_profile_id: str | None = None,
    override_id: str | None = None,
) -> GradeProfile:
    """
    Pick the profile used to grade a deal.

    Priority: the deal's own profile id, then the user's default profile,
    then the first stored profile, then the built-in "Balanced" profile.
    """
    profiles = list(profiles)

    for wanted in (override_id, default_profile_id):
        if wanted is None:
            continue
        for p in profiles:
            if p.id == wanted:
                return p

    if profiles:
        return profiles[0]
    return GradeProfile.default_profile()
