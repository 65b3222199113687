"""Presentation helpers: amount colour coding, currency text and pie segments."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from .models import ExpenseItem, ViewMode

HIGH_AMOUNT_THRESHOLD = Decimal("1000")

TONE_COLORS: Dict[str, str] = {
    "high": "#22c55e",
    "positive": "#3b82f6",
    "negative": "#ef4444",
}

SEGMENT_PALETTE = (
    "#3b82f6",
    "#22c55e",
    "#f97316",
    "#a855f7",
    "#eab308",
    "#14b8a6",
    "#ec4899",
    "#64748b",
)

CHART_CAPTION = "Expenses"
INNER_RADIUS_RATIO = 0.618
ANGULAR_INSET = 1.5


def amount_tone(amount: Decimal) -> str:
    """Classify an amount for colour coding: above 1000, above zero, or neither."""
    if amount > HIGH_AMOUNT_THRESHOLD:
        return "high"
    if amount > 0:
        return "positive"
    return "negative"


def format_currency(amount: Decimal, currency: str = "PEN") -> str:
    value = Decimal(str(amount))
    sign = "-" if value < 0 else ""
    return f"{sign}{currency} {abs(value):,.2f}"


@dataclass(frozen=True)
class ChartSegment:
    """One pie sector. Angles are degrees clockwise from twelve o'clock."""

    item_id: str
    label: str
    amount: Decimal
    start: float
    extent: float
    color: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.item_id,
            "label": self.label,
            "amount": float(self.amount),
            "start": round(self.start, 4),
            "extent": round(self.extent, 4),
            "color": self.color,
        }


def build_segments(items: Iterable[ExpenseItem], mode: ViewMode) -> List[ChartSegment]:
    """Lay out exemplar records as pie sectors sized by their own amount.

    Records with a zero or negative amount keep their legend entry but get no
    arc.
    """
    records = list(items)
    weights = [max(Decimal(str(item.amount)), Decimal("0")) for item in records]
    total = sum(weights, Decimal("0"))

    segments: List[ChartSegment] = []
    cursor = 0.0
    for index, (item, weight) in enumerate(zip(records, weights)):
        extent = float(weight / total * 360) if total > 0 else 0.0
        segments.append(
            ChartSegment(
                item_id=item.id,
                label=mode.label_for(item),
                amount=Decimal(str(item.amount)),
                start=cursor,
                extent=extent,
                color=SEGMENT_PALETTE[index % len(SEGMENT_PALETTE)],
            )
        )
        cursor += extent
    return segments


def polar_arc(start: float, extent: float) -> Tuple[float, float]:
    """Convert a segment's clockwise-from-top angles into a counter-clockwise-from-east arc.

    The returned extent is negative (clockwise) and trimmed by ``ANGULAR_INSET``
    so neighbouring sectors are separated by a small gap.
    """
    inset = ANGULAR_INSET if extent > ANGULAR_INSET else 0.0
    return 90.0 - start - inset / 2, -(extent - inset)
