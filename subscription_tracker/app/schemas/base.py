"""
Shared pydantic base class and field parsers.

The API speaks camelCase JSON (``billingCycle``, ``renewalDate``) while
Python code uses snake_case attributes.  ``CamelModel`` bridges the two
with an alias generator; FastAPI serialises responses by alias.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


MAX_COST = Decimal("99999999.99")
CENTS = Decimal("0.01")


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


def parse_timestamp(value: Any) -> Any:
    """Accept ``YYYY-MM-DD`` or ISO-8601 strings and return an aware UTC datetime.

    Non-string values are passed through for pydantic to validate.  A
    bare date means midnight UTC; naive datetimes are taken as UTC.
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("date is required")
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            if len(text) == 10:
                value = datetime.combine(date.fromisoformat(text), time.min)
            else:
                value = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"invalid date {value!r}") from exc
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return value


def parse_cost(value: Any) -> Optional[str]:
    """Normalise a cost to a two decimal string, e.g. ``"9.9"`` -> ``"9.90"``."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("cost must be a number")
    text = str(value).strip()
    if not text:
        raise ValueError("Cost is required")
    try:
        amount = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"invalid cost {text!r}") from exc
    if not amount.is_finite() or amount < 0:
        raise ValueError("cost must be a non-negative number")
    # Checked before quantize, which cannot represent huge values.
    if amount > MAX_COST:
        raise ValueError("cost is too large")
    return str(amount.quantize(CENTS))
