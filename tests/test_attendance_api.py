import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import AbsentDate

DAY = "2024-09-03"


def _url(class_id: str) -> str:
    return f"/api/v1/classes/{class_id}/attendance"


async def _absent(db: AsyncSession, class_id: str):
    result = await db.execute(select(AbsentDate.student_id).where(AbsentDate.class_id == class_id))
    return sorted(result.scalars().all())


@pytest.mark.asyncio
async def test_unmarked_students_are_present(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, (ana, ben) = await seed_class()

    response = await client.get(_url(class_id), params={"date": DAY}, headers=auth_headers())

    assert response.status_code == 200
    data = response.json()
    assert data["total_present"] == 2
    assert data["total_absent"] == 0
    assert {r["student_id"]: r["status"] for r in data["records"]} == {ana: "present", ben: "present"}


@pytest.mark.asyncio
async def test_save_writes_only_the_difference(
    client: AsyncClient,
    db_session: AsyncSession,
    seed_class,
    auth_headers,
) -> None:
    class_id, (ana, ben) = await seed_class()
    headers = auth_headers()

    first = await client.put(_url(class_id), json={"date": DAY, "absent_student_ids": [ana]}, headers=headers)
    repeat = await client.put(_url(class_id), json={"date": DAY, "absent_student_ids": [ana]}, headers=headers)
    swap = await client.put(_url(class_id), json={"date": DAY, "absent_student_ids": [ben]}, headers=headers)

    assert (first.json()["added"], first.json()["removed"]) == (1, 0)
    assert (repeat.json()["added"], repeat.json()["removed"]) == (0, 0)
    assert (swap.json()["added"], swap.json()["removed"]) == (1, 1)
    assert await _absent(db_session, class_id) == [ben]

    day = await client.get(_url(class_id), params={"date": DAY}, headers=headers)
    assert {r["student_id"]: r["status"] for r in day.json()["records"]} == {ana: "present", ben: "absent"}


@pytest.mark.asyncio
async def test_non_enrolled_ids_are_ignored(
    client: AsyncClient,
    db_session: AsyncSession,
    seed_class,
    auth_headers,
) -> None:
    class_id, (ana, _) = await seed_class()

    response = await client.put(
        _url(class_id),
        json={"date": DAY, "absent_student_ids": [ana, "student_elsewhere"]},
        headers=auth_headers(),
    )

    assert response.status_code == 200
    assert response.json()["absent_student_ids"] == [ana]
    assert await _absent(db_session, class_id) == [ana]


@pytest.mark.asyncio
async def test_subset_save_leaves_other_students_alone(
    client: AsyncClient,
    db_session: AsyncSession,
    seed_class,
    auth_headers,
) -> None:
    class_id, (ana, ben) = await seed_class()
    headers = auth_headers()
    await client.put(_url(class_id), json={"date": DAY, "absent_student_ids": [ana, ben]}, headers=headers)

    response = await client.put(
        _url(class_id),
        json={"date": DAY, "absent_student_ids": [], "student_ids": [ben]},
        headers=headers,
    )

    assert response.json()["removed"] == 1
    assert await _absent(db_session, class_id) == [ana]


@pytest.mark.asyncio
async def test_attendance_requires_class_link(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class(user_id="someone-else")

    response = await client.get(_url(class_id), params={"date": DAY}, headers=auth_headers())

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_empty_subset_means_whole_class(
    client: AsyncClient,
    db_session: AsyncSession,
    seed_class,
    auth_headers,
) -> None:
    class_id, (ana, ben) = await seed_class()
    headers = auth_headers()
    await client.put(_url(class_id), json={"date": DAY, "absent_student_ids": [ana, ben]}, headers=headers)

    response = await client.put(
        _url(class_id),
        json={"date": DAY, "absent_student_ids": [], "student_ids": []},
        headers=headers,
    )

    assert response.status_code == 200
    assert (response.json()["added"], response.json()["removed"]) == (0, 2)
    assert await _absent(db_session, class_id) == []
