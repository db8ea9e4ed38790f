from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.roster import service as roster_service
from app.core.models import (
    AbsentDate,
    Achievement,
    Behavior,
    Group,
    Point,
    RewardItem,
    StudentGroup,
    SubGroup,
    StudentSubGroup,
)

ROSTER_URL = "/api/v1/roster"


@pytest.mark.asyncio
async def test_roster_requires_identity(client: AsyncClient) -> None:
    response = await client.get(ROSTER_URL)

    assert response.status_code == 401
    assert "detail" in response.json()


@pytest.mark.asyncio
async def test_roster_rejects_bad_token(client: AsyncClient) -> None:
    response = await client.get(ROSTER_URL, headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_roster_empty_for_teacher_without_classes(client: AsyncClient, auth_headers) -> None:
    response = await client.get(ROSTER_URL, headers=auth_headers("nobody"))

    assert response.status_code == 200
    assert response.json() == []
    assert response.headers["cache-control"] == "private, max-age=30"


@pytest.mark.asyncio
async def test_roster_assembles_full_graph(
    client: AsyncClient,
    db_session: AsyncSession,
    seed_class,
    auth_headers,
) -> None:
    class_id, (ana, ben) = await seed_class()
    other_class_id, _ = await seed_class(user_id="someone-else", class_name="Not mine")

    behavior = Behavior(class_id=class_id, user_id="teacher-1", name="Helping", point_value=2)
    item = RewardItem(class_id=class_id, user_id="teacher-1", name="Sticker", price=3)
    group = Group(class_id=class_id, group_name="Red")
    db_session.add_all([behavior, item, group])
    await db_session.flush()
    sub_group = SubGroup(class_id=class_id, group_id=group.group_id, sub_group_name="Red A")
    db_session.add(sub_group)
    await db_session.flush()
    db_session.add_all(
        [
            Achievement(class_id=class_id, behavior_id=behavior.behavior_id, threshold=5, name="Helper"),
            StudentGroup(group_id=group.group_id, student_id=ana),
            StudentGroup(group_id=group.group_id, student_id="student_missing"),
            StudentSubGroup(sub_group_id=sub_group.sub_group_id, student_id=ana),
            Point(user_id="teacher-1", class_id=class_id, student_id=ana, type="positive", number_of_points=5),
            Point(user_id="teacher-1", class_id=class_id, student_id=ana, type="negative", number_of_points=-2),
            Point(
                user_id="teacher-1",
                class_id=class_id,
                student_id=ana,
                reward_item_id=item.item_id,
                type="redemption",
                number_of_points=-3,
            ),
            AbsentDate(user_id="teacher-1", class_id=class_id, student_id=ben, date=date(2024, 9, 3)),
        ]
    )
    await db_session.commit()

    response = await client.get(ROSTER_URL, headers=auth_headers())

    assert response.status_code == 200
    classes = response.json()
    assert [c["class_id"] for c in classes] == [class_id]
    assert other_class_id not in {c["class_id"] for c in classes}

    record = classes[0]
    assert record["role"] == "primary"
    assert record["class_language"] == "en-US"
    assert record["complete"] == {"s1": False, "s2": False}

    students = {s["student_id"]: s for s in record["students"]}
    assert set(students) == {ana, ben}
    assert students[ana]["points"] == 0
    assert len(students[ana]["point_history"]) == 3
    assert students[ana]["redemption_history"] == [
        {"item_id": item.item_id, "date": students[ana]["redemption_history"][0]["date"], "quantity": -3}
    ]
    assert students[ben]["absent_dates"] == ["2024-09-03"]
    assert students[ben]["points"] == 0

    (group_record,) = record["groups"]
    assert [s["student_id"] for s in group_record["students"]] == [ana]
    assert group_record["students"][0]["points"] == students[ana]["points"]
    assert [s["student_id"] for s in group_record["sub_groups"][0]["students"]] == [ana]

    (behavior_record,) = record["behaviors"]
    assert [a["name"] for a in behavior_record["achievements"]] == ["Helper"]
    assert record["reward_items"][0]["achievements"] == []


@pytest.mark.asyncio
async def test_roster_is_idempotent(client: AsyncClient, seed_class, auth_headers) -> None:
    await seed_class()
    await seed_class(class_name="Year 5 Maths")

    first = await client.get(ROSTER_URL, headers=auth_headers())
    second = await client.get(ROSTER_URL, headers=auth_headers())

    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
    assert len(first.json()) == 2


@pytest.mark.asyncio
async def test_assistant_sees_class_with_assistant_role(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class(user_id="teacher-2", role="assistant")

    response = await client.get(ROSTER_URL, headers=auth_headers("teacher-2"))

    assert response.status_code == 200
    assert [(c["class_id"], c["role"]) for c in response.json()] == [(class_id, "assistant")]


@pytest.mark.asyncio
async def test_roster_read_failure_returns_generic_error(
    client: AsyncClient,
    seed_class,
    auth_headers,
    monkeypatch,
) -> None:
    await seed_class()

    async def broken_fetch(session_factory, user_id):
        raise OperationalError("SELECT 1", {}, Exception("connection reset"))

    monkeypatch.setattr(roster_service, "fetch_roster_rows", broken_fetch)

    response = await client.get(ROSTER_URL, headers=auth_headers())

    assert response.status_code == 500
    assert response.json() == {"message": "Unable to fetch classes due to an internal error."}


@pytest.mark.asyncio
async def test_roster_invalid_record_returns_generic_error(
    client: AsyncClient,
    seed_class,
    auth_headers,
    monkeypatch,
) -> None:
    await seed_class()
    monkeypatch.setattr(roster_service, "assemble_roster", lambda rows: [{"class_id": None}])

    response = await client.get(ROSTER_URL, headers=auth_headers())

    assert response.status_code == 500
    assert response.json() == {"message": "Unable to fetch classes due to an internal error."}
