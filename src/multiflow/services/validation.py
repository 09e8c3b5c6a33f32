# src/multiflow/services/validation.py

from typing import Any

# Core fields that are truly required to reason about a deal
REQUIRED_CORE_FIELDS = [
    "purchase_price",
]

# Currency-valued top-level fields
CURRENCY_FIELDS = [
    "annual_taxes",
    "annual_insurance",
    "annual_taxes_insurance",
]

# Percent-valued fields; kept in percent units ("6.5%" -> 6.5)
PERCENT_FIELDS = [
    "down_payment_percent",
    "interest_rate",
    "operating_expense_rate",
    "appreciation_rate",
    "marginal_tax_rate",
    "land_value_percent",
]

# Form expense-mode values -> use_standard_operating_expense
EXPENSE_MODES = {
    "simple": True,
    "standard": True,
    "detailed": False,
    "itemized": False,
}


def _clean_numeric_str(s: str) -> str:
    s = s.strip()
    if s.endswith("%"):
        s = s[:-1]
    return s.replace("$", "").replace(",", "").strip()


def _to_num(val: Any, field_name: str) -> float:
    """
    Coerce values like:
      - 250000
      - "250000"
      - "$250,000.00"
      - "6.5"
      - "6.5%"
    into float.
    """
    if val is None:
        raise ValueError(f"Missing required numeric field: {field_name}")
    if isinstance(val, bool):
        raise ValueError(f"Invalid type for {field_name}: {type(val)}")
    if isinstance(val, (int, float)):
        return float(val)
    if isinstance(val, str):
        s = _clean_numeric_str(val)
        if not s:
            raise ValueError(f"Missing required numeric field: {field_name}")
        try:
            return float(s)
        except ValueError:
            raise ValueError(f"Invalid number for {field_name}: {val!r}")
    raise ValueError(f"Invalid type for {field_name}: {type(val)}")


def _to_num_optional(val: Any, field_name: str) -> float | None:
    """
    Optional numeric fields: missing or blank stays None (unknown is not zero);
    anything present must parse.
    """
    if val is None:
        return None
    if isinstance(val, str) and not _clean_numeric_str(val):
        return None
    return _to_num(val, field_name)


def _prepare_rent_unit(raw_unit: Any, idx: int) -> dict[str, Any]:
    if not isinstance(raw_unit, dict):
        raise ValueError(f"rent_roll[{idx}] must be an object")
    unit = dict(raw_unit)
    for key in ("monthly_rent", "MonthlyRent"):
        if key in unit:
            rent = _to_num_optional(unit[key], f"rent_roll[{idx}].{key}")
            unit[key] = 0.0 if rent is None else rent
    for key in ("bedrooms", "Bedrooms", "bathrooms", "Bathrooms"):
        if key in unit:
            unit[key] = _to_num_optional(unit[key], f"rent_roll[{idx}].{key}")
    return unit


def _prepare_expense_item(raw_item: Any, idx: int) -> dict[str, Any]:
    if not isinstance(raw_item, dict):
        raise ValueError(f"operating_expenses[{idx}] must be an object")
    item = dict(raw_item)
    item["annual_amount"] = _to_num(item.get("annual_amount"), f"operating_expenses[{idx}].annual_amount")
    return item


def validate_and_prepare_payload(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Normalize an incoming deal payload (property store record or form input).

    Responsibilities:
      - Ensure the purchase price exists.
      - Normalize currency / percent strings to floats.
      - Keep missing optional fields as None so the engine can report
        "insufficient inputs" instead of computing with made-up zeros.
      - Map the form's expense mode onto use_standard_operating_expense.
    """
    # 1. Check core required fields
    for field in REQUIRED_CORE_FIELDS:
        if field not in raw:
            raise ValueError(f"Missing required field: {field}")

    cleaned: dict[str, Any] = dict(raw)

    # 2. Required core numeric: purchase_price
    cleaned["purchase_price"] = _to_num(raw["purchase_price"], "purchase_price")

    # 3. Optional numerics
    for field in CURRENCY_FIELDS + PERCENT_FIELDS:
        if field in raw:
            cleaned[field] = _to_num_optional(raw[field], field)

    # loan_term_years
    if raw.get("loan_term_years") not in (None, ""):
        try:
            cleaned["loan_term_years"] = int(_to_num(raw["loan_term_years"], "loan_term_years"))
        except ValueError:
            raise ValueError("Invalid loan_term_years")
    else:
        cleaned["loan_term_years"] = None

    # 4. Expense mode
    mode = raw.get("expense_mode")
    if mode is not None:
        key = str(mode).strip().lower()
        if key not in EXPENSE_MODES:
            raise ValueError(f"Invalid expense_mode: {mode!r}")
        cleaned["use_standard_operating_expense"] = EXPENSE_MODES[key]

    # 5. Nested lists
    if raw.get("rent_roll") is not None:
        cleaned["rent_roll"] = [_prepare_rent_unit(u, i) for i, u in enumerate(raw["rent_roll"])]
    if raw.get("operating_expenses") is not None:
        cleaned["operating_expenses"] = [
            _prepare_expense_item(e, i) for i, e in enumerate(raw["operating_expenses"])
        ]

    return cleaned
