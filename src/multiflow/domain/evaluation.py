from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal

from multiflow.domain.deal import ExpenseAccounting
from multiflow.domain.grading import Grade
from multiflow.domain.metrics import CashFlowState, DealMetrics, MortgageBreakdown
from multiflow.domain.pillars import PillarEvaluation, PillarResult

if TYPE_CHECKING:
    from multiflow.analysis.expenses import ExpenseModule
    from multiflow.analysis.scoring import WeightedScore

Severity = Literal["info", "warning", "error"]


@dataclass(frozen=True)
class GuardrailFlag:
    code: str
    severity: Severity
    message: str
    context: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DealEvaluation:
    """Everything the deal screens and the PDF summary need for one deal."""
    deal_id: str | None
    address: str
    purchase_price: float
    accounting: ExpenseAccounting

    metrics: DealMetrics
    mortgage: MortgageBreakdown | None
    expenses: "ExpenseModule"

    base_grade: Grade
    weighted_score: "WeightedScore"
    weighted_grade: Grade
    profile_name: str
    profile_color_hex: str

    pillars: PillarEvaluation
    cash_flow_state: CashFlowState
    target_dcr: float
    max_offer: float | None

    flags: tuple[GuardrailFlag, ...] = ()

    @property
    def has_flags(self) -> bool:
        return bool(self.flags)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe view; enums become their string values."""
        return _jsonable(
            {
                "deal_id": self.deal_id,
                "address": self.address,
                "purchase_price": self.purchase_price,
                "accounting": self.accounting,
                "metrics": asdict(self.metrics),
                "mortgage": asdict(self.mortgage) if self.mortgage is not None else None,
                "expenses": self.expenses.summary(),
                "base_grade": self.base_grade,
                "weighted_score": self.weighted_score.summary(),
                "weighted_grade": self.weighted_grade,
                "profile": {"name": self.profile_name, "color_hex": self.profile_color_hex},
                "pillars": [_pillar_row(r) for r in self.pillars.results],
                "cash_flow_state": self.cash_flow_state,
                "cash_flow_label": self.cash_flow_state.label,
                "target_dcr": self.target_dcr,
                "max_offer": self.max_offer,
                "guardrails": {
                    "has_flags": self.has_flags,
                    "flags": [asdict(f) for f in self.flags],
                },
            }
        )


def _pillar_row(result: PillarResult) -> dict[str, Any]:
    row = asdict(result)
    row["title"] = result.pillar.title
    row["short_title"] = result.pillar.short_title
    row["status_label"] = result.status.label
    return row


def _jsonable(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {(k.value if isinstance(k, Enum) else k): _jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_jsonable(v) for v in obj]
    return obj
