import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import Point, Student, StudentClass


def _url(class_id: str, suffix: str = "") -> str:
    return f"/api/v1/classes/{class_id}/students{suffix}"


@pytest.mark.asyncio
async def test_add_and_update_student(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class(students=[])
    headers = auth_headers()

    created = await client.post(
        _url(class_id),
        json={"student_name_first_en": "Carla", "student_name_last_en": "Mendes", "student_number": 7},
        headers=headers,
    )
    assert created.status_code == 201
    student = created.json()
    assert student["student_name_en"] == "Carla Mendes"
    assert student["class_id"] == class_id

    updated = await client.patch(
        _url(class_id, f"/{student['student_id']}"),
        json={"student_name_last_en": "Costa", "student_sex": "female"},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["student_name_en"] == "Carla Costa"
    assert updated.json()["student_sex"] == "female"

    listed = await client.get(_url(class_id), headers=headers)
    assert [s["student_id"] for s in listed.json()] == [student["student_id"]]


@pytest.mark.asyncio
async def test_invalid_email_is_rejected(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class(students=[])

    response = await client.post(
        _url(class_id),
        json={"student_name_first_en": "Dan", "student_email": "not-an-email"},
        headers=auth_headers(),
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_remove_student_drops_class_rows(
    client: AsyncClient,
    db_session: AsyncSession,
    seed_class,
    auth_headers,
) -> None:
    class_id, (ana, ben) = await seed_class()
    db_session.add(Point(user_id="teacher-1", class_id=class_id, student_id=ana, type="positive", number_of_points=3))
    await db_session.commit()

    response = await client.delete(_url(class_id, f"/{ana}"), headers=auth_headers())

    assert response.status_code == 204
    remaining = (
        await db_session.execute(select(StudentClass.student_id).where(StudentClass.class_id == class_id))
    ).scalars().all()
    assert remaining == [ben]
    points = (await db_session.execute(select(func.count()).select_from(Point))).scalar_one()
    assert points == 0
    assert (await db_session.execute(select(Student).where(Student.student_id == ana))).scalar_one_or_none() is None


@pytest.mark.asyncio
async def test_remove_unknown_student(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class()

    response = await client.delete(_url(class_id, "/student_missing"), headers=auth_headers())

    assert response.status_code == 404
