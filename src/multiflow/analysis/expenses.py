# src/multiflow/analysis/expenses.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from multiflow.domain.deal import DealInputs, OperatingExpenseItem

DEFAULT_TAX_RATE = 0.0223             # of purchase price
DEFAULT_INSURANCE_PER_UNIT = 800.0    # annual, per door
DEFAULT_MANAGEMENT_RATE = 0.10        # of gross rent
DEFAULT_MAINTENANCE_RATE = 0.05       # of gross rent
VACANCY_RATE = 0.05                   # vacancy + collection loss


def _effective(override: float | None, default: float) -> float:
    if override is None:
        return default
    return max(override, 0.0)


@dataclass(frozen=True)
class ExpenseModule:
    """
    Itemized operating expenses for one deal.

    Each of the four line items is the user's figure when given, otherwise a
    default derived from price, door count or gross rent.
    """
    purchase_price: float
    unit_count: int
    gross_annual_rent: float
    annual_taxes: float | None = None
    annual_insurance: float | None = None
    management_fee: float | None = None
    maintenance_reserve: float | None = None

    # --- defaults ---
    @property
    def default_annual_taxes(self) -> float:
        return self.purchase_price * DEFAULT_TAX_RATE

    @property
    def default_annual_insurance(self) -> float:
        return DEFAULT_INSURANCE_PER_UNIT * self.unit_count

    @property
    def default_management_fee(self) -> float:
        return self.gross_annual_rent * DEFAULT_MANAGEMENT_RATE

    @property
    def default_maintenance_reserve(self) -> float:
        return self.gross_annual_rent * DEFAULT_MAINTENANCE_RATE

    # --- effective values ---
    @property
    def effective_annual_taxes(self) -> float:
        return _effective(self.annual_taxes, self.default_annual_taxes)

    @property
    def effective_annual_insurance(self) -> float:
        return _effective(self.annual_insurance, self.default_annual_insurance)

    @property
    def effective_management_fee(self) -> float:
        return _effective(self.management_fee, self.default_management_fee)

    @property
    def effective_maintenance_reserve(self) -> float:
        return _effective(self.maintenance_reserve, self.default_maintenance_reserve)

    @property
    def total_operating_expenses(self) -> float:
        return (
            self.effective_annual_taxes
            + self.effective_annual_insurance
            + self.effective_management_fee
            + self.effective_maintenance_reserve
        )

    @property
    def net_operating_income(self) -> float:
        # Vacancy comes off gross rent before expenses.
        return self.gross_annual_rent * (1.0 - VACANCY_RATE) - self.total_operating_expenses

    @property
    def expense_to_income_ratio(self) -> float:
        if self.gross_annual_rent == 0:
            return 0.0
        return self.total_operating_expenses / self.gross_annual_rent

    def line_items(self) -> list[OperatingExpenseItem]:
        """Items persisted with an itemized deal (taxes/insurance are stored on the deal itself)."""
        return [
            OperatingExpenseItem(name="Management Fee", annual_amount=self.effective_management_fee),
            OperatingExpenseItem(name="Maintenance Reserves", annual_amount=self.effective_maintenance_reserve),
        ]

    def summary(self) -> dict[str, Any]:
        return {
            "purchase_price": self.purchase_price,
            "unit_count": self.unit_count,
            "gross_annual_rent": self.gross_annual_rent,
            "annual_taxes": self.effective_annual_taxes,
            "annual_insurance": self.effective_annual_insurance,
            "management_fee": self.effective_management_fee,
            "maintenance_reserve": self.effective_maintenance_reserve,
            "total_operating_expenses": self.total_operating_expenses,
            "net_operating_income": self.net_operating_income,
            "expense_to_income_ratio": self.expense_to_income_ratio,
            "defaulted": {
                "annual_taxes": self.annual_taxes is None,
                "annual_insurance": self.annual_insurance is None,
                "management_fee": self.management_fee is None,
                "maintenance_reserve": self.maintenance_reserve is None,
            },
        }


def expense_module_for(deal: DealInputs) -> ExpenseModule:
    """
    Build the expense module from a stored deal.

    Explicit taxes/insurance on the deal win over itemized entries. Older
    records with only a combined taxes + insurance figure use it as taxes and
    treat insurance as already covered.
    """
    itemized = deal.itemized_amounts()

    taxes = deal.annual_taxes
    if taxes is None:
        taxes = itemized.get("annual_taxes")

    insurance = deal.annual_insurance
    if insurance is None:
        insurance = itemized.get("annual_insurance")

    if taxes is None and deal.annual_taxes_insurance is not None:
        taxes = deal.annual_taxes_insurance
        if insurance is None:
            insurance = 0.0

    return ExpenseModule(
        purchase_price=deal.purchase_price,
        unit_count=deal.unit_count,
        gross_annual_rent=deal.gross_annual_rent,
        annual_taxes=taxes,
        annual_insurance=insurance,
        management_fee=itemized.get("management_fee"),
        maintenance_reserve=itemized.get("maintenance_reserve"),
    )
