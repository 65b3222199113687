"""Data models for the expense tracker domain."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from operator import attrgetter
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from .exceptions import ValidationError

__all__ = ["ExpenseItem", "ViewMode", "PERSONAL", "BUSINESS", "as_stored_amount"]

PERSONAL = "Personal"
BUSINESS = "Business"


def _require_str(data: Dict[str, Any], field: str) -> str:
    value = data[field]
    if not isinstance(value, str):
        raise TypeError(f"{field} must be a string, got {type(value).__name__}")
    return value


def _require_amount(value: Any) -> Any:
    # bool is an int subclass; a JSON true/false is never an amount.
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise TypeError(f"amount must be a number, got {type(value).__name__}")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ValueError("amount is out of range") from exc
    if not math.isfinite(number):
        raise ValueError("amount must be finite")
    return value


def as_stored_amount(value: Any) -> Decimal:
    """Round an amount to the double precision it is persisted with."""
    return Decimal(repr(float(value)))


@dataclass(frozen=True)
class ExpenseItem:
    id: str
    name: str
    category: str
    amount: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", as_stored_amount(self.amount))

    @classmethod
    def create(cls, name: str, category: str, amount: Decimal) -> "ExpenseItem":
        """Build a new record with a freshly generated id."""
        return cls(id=str(uuid4()), name=name, category=category, amount=amount)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the persisted layout; the category lives under ``type``."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.category,
            "amount": float(self.amount),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExpenseItem":
        """Hydrate a record, raising on any field that does not match the layout."""
        if not isinstance(data, dict):
            raise TypeError("expense entry must be an object")
        return cls(
            id=_require_str(data, "id"),
            name=_require_str(data, "name"),
            category=_require_str(data, "type"),
            amount=_require_amount(data["amount"]),
        )


class ViewMode(Enum):
    """Active category filter and chart grouping key, switched together."""

    PERSONAL = "personal"
    BUSINESS = "business"
    BOTH = "both"

    @property
    def category(self) -> Optional[str]:
        if self is ViewMode.PERSONAL:
            return PERSONAL
        if self is ViewMode.BUSINESS:
            return BUSINESS
        return None

    @property
    def group_key(self) -> str:
        # A single category groups by expense name; the combined view by category.
        return "category" if self is ViewMode.BOTH else "name"

    @property
    def title(self) -> str:
        return self.category or "Both"

    @property
    def key_fn(self) -> Callable[[ExpenseItem], str]:
        return attrgetter(self.group_key)

    def label_for(self, item: ExpenseItem) -> str:
        return self.key_fn(item)

    @classmethod
    def parse(cls, value: Optional[str]) -> "ViewMode":
        if value is None:
            return cls.BOTH
        if not isinstance(value, str):
            raise ValidationError("mode must be a string")
        canonical = value.strip().lower()
        if not canonical:
            return cls.BOTH
        try:
            return cls(canonical)
        except ValueError as exc:
            allowed = ", ".join(mode.value for mode in cls)
            raise ValidationError(f"mode must be one of: {allowed}") from exc
