"""
Point ledger reduction.

A student's balance is never stored: it is the sum of ``number_of_points``
over their transactions, which already carry their sign (positive and
negative behaviours, negative redemptions). No per-type sign flip happens
here.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from app.core.enums import PointType

POINT_HISTORY_FIELDS = (
    "id",
    "user_id",
    "class_id",
    "student_id",
    "behavior_id",
    "reward_item_id",
    "type",
    "number_of_points",
    "created_date",
)


@dataclass
class LedgerSummary:
    points: int = 0
    point_history: List[Dict[str, Any]] = field(default_factory=list)
    redemption_history: List[Dict[str, Any]] = field(default_factory=list)


def point_history_entry(point: Any) -> Dict[str, Any]:
    """Client view of one transaction; drops updated_date."""
    return {name: getattr(point, name) for name in POINT_HISTORY_FIELDS}


def redemption_entry(point: Any) -> Dict[str, Any]:
    # reward_item_id is passed through as-is, including None on a broken row.
    return {
        "item_id": point.reward_item_id,
        "date": point.created_date,
        "quantity": point.number_of_points,
    }


def reduce_ledger(transactions: Sequence[Any]) -> LedgerSummary:
    """Fold a student's transactions into total, history and redemptions."""
    summary = LedgerSummary()
    for point in transactions:
        summary.points += point.number_of_points
        summary.point_history.append(point_history_entry(point))
        if point.type == PointType.REDEMPTION.value:
            summary.redemption_history.append(redemption_entry(point))
    return summary


def summarize_by_type(transactions: Sequence[Any]) -> Dict[str, int]:
    """Per-type subtotals shown on the student card, plus the overall balance."""
    totals = {point_type.value: 0 for point_type in PointType}
    for point in transactions:
        if point.type in totals:
            totals[point.type] += point.number_of_points
    totals["total"] = sum(point.number_of_points for point in transactions)
    return totals
