from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Pillar(str, Enum):
    CASH_FLOW = "cashFlow"
    MORTGAGE_PAYDOWN = "mortgagePaydown"
    EQUITY = "equity"
    TAX_INCENTIVES = "taxIncentives"

    @property
    def title(self) -> str:
        return _PILLAR_TITLES[self]

    @property
    def short_title(self) -> str:
        return _PILLAR_SHORT_TITLES[self]


_PILLAR_TITLES = {
    Pillar.CASH_FLOW: "Cash Flow",
    Pillar.MORTGAGE_PAYDOWN: "Mortgage Paydown",
    Pillar.EQUITY: "Equity",
    Pillar.TAX_INCENTIVES: "Tax Incentives",
}

_PILLAR_SHORT_TITLES = {
    Pillar.CASH_FLOW: "Cash Flow",
    Pillar.MORTGAGE_PAYDOWN: "Paydown",
    Pillar.EQUITY: "Equity",
    Pillar.TAX_INCENTIVES: "Tax",
}


class PillarStatus(str, Enum):
    MET = "met"
    NOT_MET = "notMet"
    BORDERLINE = "borderline"
    NEEDS_INPUT = "needsInput"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    PillarStatus.MET: "Met",
    PillarStatus.NOT_MET: "Not Met",
    PillarStatus.BORDERLINE: "Borderline",
    PillarStatus.NEEDS_INPUT: "Needs Inputs",
}


@dataclass(frozen=True)
class PillarResult:
    pillar: Pillar
    status: PillarStatus
    detail: str
    value: float | None = None
    monthly_value: float | None = None
    annual_value: float | None = None
    threshold: float | None = None

    @property
    def is_met(self) -> bool:
        return self.status is PillarStatus.MET


@dataclass(frozen=True)
class PillarEvaluation:
    """One result per pillar, in Pillar declaration order."""
    results: tuple[PillarResult, ...]

    def __post_init__(self) -> None:
        got = [r.pillar for r in self.results]
        if got != list(Pillar):
            raise ValueError(f"expected one result per pillar in order, got {got}")

    @property
    def met_pillars(self) -> list[Pillar]:
        return [r.pillar for r in self.results if r.is_met]

    def result_for(self, pillar: Pillar) -> PillarResult:
        for r in self.results:
            if r.pillar is pillar:
                return r
        raise KeyError(pillar)
