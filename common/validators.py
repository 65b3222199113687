"""Input parsing helpers shared by the API, CLI and desktop front ends.

The store itself stores whatever it is given; these only turn raw user input
into the right Python types.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import List

from .exceptions import ValidationError

NAME_MAX_LENGTH = 100
CATEGORY_MAX_LENGTH = 50


def parse_amount(raw: object, field: str) -> Decimal:
    """Convert raw input to a signed Decimal; zero and negatives are allowed."""
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    text = raw.replace(",", "").strip() if isinstance(raw, str) else raw
    try:
        amount = Decimal(str(text))
    except (InvalidOperation, TypeError) as exc:  # type: ignore[arg-type]
        raise ValidationError(f"{field} must be a numeric value") from exc
    # Amounts are stored as doubles, so anything past the float range is out too.
    if not amount.is_finite() or not math.isfinite(float(amount)):
        raise ValidationError(f"{field} must be a finite number")
    return amount


def validate_str(value: object, field: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def parse_positions(raw: object, field: str) -> List[int]:
    """Accept a list of non-negative integer row positions."""
    if not isinstance(raw, (list, tuple)):
        raise ValidationError(f"{field} must be a list of row positions")
    positions: List[int] = []
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field} must contain integers only")
        if value < 0:
            raise ValidationError(f"{field} cannot contain negative positions")
        positions.append(value)
    return positions
