# src/multiflow/domain/deal.py
from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ExpenseAccounting(str, Enum):
    """
    How operating expenses feed NOI and cash flow.

    BLENDED_RATE: NOI = rent * (1 - rate); the rate excludes taxes and
        insurance, so cash flow subtracts them after debt service.
    ITEMIZED: NOI comes from the expense module's line items, which already
        hold taxes, insurance and a 5% vacancy haircut; cash flow subtracts
        debt service only.
    """

    BLENDED_RATE = "blended_rate"
    ITEMIZED = "itemized"


_BEDS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*br")
_BATHS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*ba")


def beds_baths_from_unit_type(text: str | None) -> tuple[float | None, float | None]:
    """
    Pull bed/bath counts out of free-text unit types like "2br/1ba" or "Studio".

    A studio with no explicit bedroom count is 0 beds and 1 bath unless a
    bath count is given.
    """
    lower = (text or "").lower()

    beds_match = _BEDS_RE.search(lower)
    baths_match = _BATHS_RE.search(lower)
    beds = float(beds_match.group(1)) if beds_match else None
    baths = float(baths_match.group(1)) if baths_match else None

    if beds is None and "studio" in lower:
        return 0.0, baths if baths is not None else 1.0
    return beds, baths


class RentUnit(BaseModel):
    # The property store writes rent-roll entries with capitalized keys.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    monthly_rent: float = Field(0.0, ge=0.0, alias="MonthlyRent")
    unit_type: str = Field("", alias="UnitType")
    bedrooms: float | None = Field(None, ge=0.0, alias="Bedrooms")
    bathrooms: float | None = Field(None, ge=0.0, alias="Bathrooms")

    @model_validator(mode="after")
    def _fill_beds_baths(self) -> "RentUnit":
        if self.bedrooms is not None and self.bathrooms is not None:
            return self
        beds, baths = beds_baths_from_unit_type(self.unit_type)
        if self.bedrooms is None:
            self.bedrooms = beds
        if self.bathrooms is None:
            self.bathrooms = baths
        return self


# Itemized expense names we recognise, keyed to the expense module slot they fill.
EXPENSE_ITEM_SLOTS = {
    "management fee": "management_fee",
    "management": "management_fee",
    "mgmt fee": "management_fee",
    "property management": "management_fee",
    "maintenance reserves": "maintenance_reserve",
    "maintenance reserve": "maintenance_reserve",
    "maintenance": "maintenance_reserve",
    "taxes": "annual_taxes",
    "property taxes": "annual_taxes",
    "insurance": "annual_insurance",
}


class OperatingExpenseItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str
    annual_amount: float = Field(..., ge=0.0)

    @field_validator("name")
    @classmethod
    def _known_name(cls, v: str) -> str:
        if v.strip().lower() not in EXPENSE_ITEM_SLOTS:
            raise ValueError(f"unsupported operating expense item: {v!r}")
        return v.strip()

    @property
    def slot(self) -> str:
        return EXPENSE_ITEM_SLOTS[self.name.lower()]


class DealInputs(BaseModel):
    """
    A deal as stored by the property store or entered in the evaluator form.

    Percent fields use percent units (6.5 means 6.5%). Anything the engine
    can't work without (down payment, interest rate) is optional here; the
    engine reports "insufficient inputs" instead of guessing.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    address: str = ""
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None

    purchase_price: float = Field(..., ge=0.0)
    rent_roll: list[RentUnit] = Field(default_factory=list)

    use_standard_operating_expense: bool | None = None
    operating_expense_rate: float | None = Field(None, ge=0.0, le=100.0)
    operating_expenses: list[OperatingExpenseItem] | None = None

    annual_taxes: float | None = Field(None, ge=0.0)
    annual_insurance: float | None = Field(None, ge=0.0)
    # Older records stored one combined taxes + insurance figure.
    annual_taxes_insurance: float | None = Field(None, ge=0.0)

    loan_term_years: int | None = Field(None, gt=0)
    down_payment_percent: float | None = Field(None, ge=0.0, le=100.0)
    interest_rate: float | None = Field(None, ge=0.0, le=100.0)

    appreciation_rate: float | None = None
    marginal_tax_rate: float | None = Field(None, ge=0.0, le=100.0)
    land_value_percent: float | None = Field(None, ge=0.0, le=100.0)

    grade_profile_id: str | None = None

    @property
    def unit_count(self) -> int:
        return max(len(self.rent_roll), 1)

    @property
    def gross_annual_rent(self) -> float:
        return sum(u.monthly_rent for u in self.rent_roll) * 12.0

    @property
    def accounting(self) -> ExpenseAccounting:
        if self.use_standard_operating_expense is False:
            return ExpenseAccounting.ITEMIZED
        return ExpenseAccounting.BLENDED_RATE

    def itemized_amounts(self) -> dict[str, float]:
        """Sum itemized expenses per expense module slot."""
        out: dict[str, float] = {}
        for item in self.operating_expenses or []:
            out[item.slot] = out.get(item.slot, 0.0) + item.annual_amount
        return out
