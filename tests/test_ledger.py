from datetime import datetime, timedelta, timezone

from app.api.v1.roster.ledger import reduce_ledger, summarize_by_type
from app.core.models import Point

T0 = datetime(2024, 9, 2, 8, 30, tzinfo=timezone.utc)


def _point(n: int, points: int, type_: str, reward_item_id=None, behavior_id=None) -> Point:
    return Point(
        id=f"point_{n}",
        user_id="teacher-1",
        class_id="class_1",
        student_id="student_1",
        behavior_id=behavior_id,
        reward_item_id=reward_item_id,
        type=type_,
        number_of_points=points,
        created_date=T0 + timedelta(minutes=n),
        updated_date=T0 + timedelta(minutes=n),
    )


def test_empty_ledger() -> None:
    summary = reduce_ledger([])

    assert summary.points == 0
    assert summary.point_history == []
    assert summary.redemption_history == []


def test_balance_is_signed_sum_and_history_keeps_order() -> None:
    transactions = [
        _point(1, 5, "positive", behavior_id="behavior_a"),
        _point(2, -2, "negative", behavior_id="behavior_b"),
        _point(3, -3, "redemption", reward_item_id="item_x"),
    ]

    summary = reduce_ledger(transactions)

    assert summary.points == 0
    assert [entry["id"] for entry in summary.point_history] == ["point_1", "point_2", "point_3"]
    assert summary.redemption_history == [{"item_id": "item_x", "date": T0 + timedelta(minutes=3), "quantity": -3}]


def test_history_entries_drop_updated_date() -> None:
    summary = reduce_ledger([_point(1, 2, "positive")])

    entry = summary.point_history[0]
    assert "updated_date" not in entry
    assert entry["created_date"] == T0 + timedelta(minutes=1)
    assert entry["number_of_points"] == 2


def test_no_sign_flip_by_type() -> None:
    # A positive-valued redemption row is summed as stored.
    summary = reduce_ledger([_point(1, 4, "redemption", reward_item_id="item_x"), _point(2, 1, "positive")])

    assert summary.points == 5


def test_redemption_with_missing_reward_item_keeps_null_id() -> None:
    summary = reduce_ledger([_point(1, -6, "redemption")])

    assert summary.redemption_history == [{"item_id": None, "date": T0 + timedelta(minutes=1), "quantity": -6}]


def test_redemptions_are_the_redemption_subset_in_order() -> None:
    transactions = [
        _point(1, -1, "redemption", reward_item_id="item_a"),
        _point(2, 3, "positive"),
        _point(3, -2, "redemption", reward_item_id="item_b"),
    ]

    summary = reduce_ledger(transactions)

    assert [r["item_id"] for r in summary.redemption_history] == ["item_a", "item_b"]
    assert len(summary.point_history) == 3


def test_summarize_by_type() -> None:
    transactions = [
        _point(1, 5, "positive"),
        _point(2, 3, "positive"),
        _point(3, -2, "negative"),
        _point(4, -4, "redemption", reward_item_id="item_a"),
    ]

    totals = summarize_by_type(transactions)

    assert totals == {"positive": 8, "negative": -2, "redemption": -4, "total": 2}
    assert totals["total"] == reduce_ledger(transactions).points
