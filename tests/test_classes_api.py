import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import (
    AbsentDate,
    Behavior,
    Group,
    Point,
    SchoolClass,
    Student,
    StudentClass,
    StudentGroup,
    TeacherClass,
)

CLASSES_URL = "/api/v1/classes"


async def _count(db: AsyncSession, model, *where) -> int:
    result = await db.execute(select(func.count()).select_from(model).where(*where))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_create_class_with_students(client: AsyncClient, db_session: AsyncSession, auth_headers) -> None:
    payload = {
        "class_name": "Year 4 English",
        "class_grade": "4",
        "students": [
            {"student_name_first_en": "Ana", "student_name_last_en": "Silva", "student_sex": "female"},
            {"student_name_first_en": "Ben"},
        ],
    }

    response = await client.post(CLASSES_URL, json=payload, headers=auth_headers())

    assert response.status_code == 201
    data = response.json()
    assert data["role"] == "primary"
    assert data["class_language"] == "en-US"
    assert len(data["class_code"]) == 6
    assert data["complete"] == {"s1": False, "s2": False}
    assert await _count(db_session, StudentClass, StudentClass.class_id == data["class_id"]) == 2
    names = (await db_session.execute(select(Student.student_name_en).order_by(Student.student_name_en))).scalars()
    assert list(names) == ["Ana Silva", "Ben"]
    link_ids = (
        await db_session.execute(select(TeacherClass.assignment_id).where(TeacherClass.class_id == data["class_id"]))
    ).scalars().all()
    assert len(link_ids) == 1
    assert link_ids[0].startswith("teacher_class_")


@pytest.mark.asyncio
async def test_list_classes_only_returns_own(client: AsyncClient, seed_class, auth_headers) -> None:
    mine, _ = await seed_class()
    await seed_class(user_id="someone-else")

    response = await client.get(CLASSES_URL, headers=auth_headers())

    assert response.status_code == 200
    assert [c["class_id"] for c in response.json()] == [mine]


@pytest.mark.asyncio
async def test_join_by_code_as_assistant(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class(class_code="JOIN42")

    response = await client.post(f"{CLASSES_URL}/join", json={"class_code": "join42"}, headers=auth_headers("teacher-2"))

    assert response.status_code == 201
    assert response.json()["class_id"] == class_id
    assert response.json()["role"] == "assistant"

    again = await client.post(f"{CLASSES_URL}/join", json={"class_code": "JOIN42"}, headers=auth_headers("teacher-2"))
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_join_unknown_code(client: AsyncClient, auth_headers) -> None:
    response = await client.post(f"{CLASSES_URL}/join", json={"class_code": "NOPE00"}, headers=auth_headers())

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_requires_primary(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class(user_id="teacher-2", role="assistant")

    response = await client.patch(
        f"{CLASSES_URL}/{class_id}", json={"class_name": "Renamed"}, headers=auth_headers("teacher-2")
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unlinked_class_is_not_found(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class(user_id="someone-else")

    response = await client.patch(f"{CLASSES_URL}/{class_id}", json={"class_name": "Mine now"}, headers=auth_headers())

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_and_completion(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class()

    renamed = await client.patch(
        f"{CLASSES_URL}/{class_id}", json={"class_name": "Year 4 Reading"}, headers=auth_headers()
    )
    completed = await client.put(f"{CLASSES_URL}/{class_id}/complete", json={"s1": True}, headers=auth_headers())

    assert renamed.status_code == 200
    assert renamed.json()["class_name"] == "Year 4 Reading"
    assert completed.status_code == 200
    assert completed.json()["complete"] == {"s1": True, "s2": False}


@pytest.mark.asyncio
async def test_primary_delete_cascades(
    client: AsyncClient,
    db_session: AsyncSession,
    seed_class,
    auth_headers,
) -> None:
    class_id, (ana, ben) = await seed_class()
    other_class_id, _ = await seed_class(class_name="Year 5")
    db_session.add(StudentClass(student_id=ana, class_id=other_class_id))
    group = Group(class_id=class_id, group_name="Red")
    db_session.add_all([group, Behavior(class_id=class_id, user_id="teacher-1", name="Helping", point_value=1)])
    await db_session.flush()
    db_session.add_all(
        [
            StudentGroup(group_id=group.group_id, student_id=ana),
            Point(user_id="teacher-1", class_id=class_id, student_id=ana, type="positive", number_of_points=1),
            AbsentDate(user_id="teacher-1", class_id=class_id, student_id=ben, date=group.created_date.date()),
        ]
    )
    await db_session.commit()

    response = await client.delete(f"{CLASSES_URL}/{class_id}", headers=auth_headers())

    assert response.status_code == 200
    assert response.json() == {"class_id": class_id, "outcome": "deleted"}
    for model in (Group, Behavior, Point, AbsentDate, StudentClass, TeacherClass):
        assert await _count(db_session, model, model.class_id == class_id) == 0
    assert await _count(db_session, StudentGroup) == 0
    assert await _count(db_session, SchoolClass, SchoolClass.class_id == class_id) == 0
    # Ana is still enrolled elsewhere; Ben is gone with the class.
    assert await _count(db_session, Student, Student.student_id == ana) == 1
    assert await _count(db_session, Student, Student.student_id == ben) == 0


@pytest.mark.asyncio
async def test_assistant_delete_only_leaves(
    client: AsyncClient,
    db_session: AsyncSession,
    seed_class,
    auth_headers,
) -> None:
    class_id, _ = await seed_class()
    db_session.add(TeacherClass(user_id="teacher-2", class_id=class_id, role="assistant"))
    await db_session.commit()

    response = await client.delete(f"{CLASSES_URL}/{class_id}", headers=auth_headers("teacher-2"))

    assert response.status_code == 200
    assert response.json()["outcome"] == "left"
    assert await _count(db_session, SchoolClass, SchoolClass.class_id == class_id) == 1
    assert await _count(db_session, TeacherClass, TeacherClass.class_id == class_id) == 1
    assert await _count(db_session, StudentClass, StudentClass.class_id == class_id) == 2
