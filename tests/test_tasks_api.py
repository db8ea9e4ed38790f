import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import StudentExpectation


def _url(class_id: str, suffix: str) -> str:
    return f"/api/v1/classes/{class_id}{suffix}"


# ----- Assignments -----
@pytest.mark.asyncio
async def test_assignment_completion_upsert(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, (ana, ben) = await seed_class()
    headers = auth_headers()
    topic = (await client.post(_url(class_id, "/topics"), json={"name": "Fractions"}, headers=headers)).json()
    assignment = (
        await client.post(
            _url(class_id, "/assignments"),
            json={"name": "Worksheet 1", "topic": topic["id"]},
            headers=headers,
        )
    ).json()
    assert assignment["students"] == []
    completion_url = _url(class_id, f"/assignments/{assignment['id']}/students/{ana}")

    done = await client.put(completion_url, json={"complete": True}, headers=headers)
    undone = await client.put(completion_url, json={"complete": False}, headers=headers)

    assert done.status_code == 200
    assert done.json()["complete"] is True
    assert done.json()["completed_ts"] is not None
    assert undone.json() == {"student_id": ana, "complete": False, "completed_ts": None}

    listed = await client.get(_url(class_id, "/assignments"), headers=headers)
    (record,) = listed.json()
    assert record["topic"] == topic["id"]
    assert record["students"] == [{"student_id": ana, "complete": False, "completed_ts": None}]


@pytest.mark.asyncio
async def test_completion_for_unknown_student(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class()
    headers = auth_headers()
    assignment = (await client.post(_url(class_id, "/assignments"), json={"name": "Quiz"}, headers=headers)).json()

    response = await client.put(
        _url(class_id, f"/assignments/{assignment['id']}/students/student_elsewhere"),
        json={"complete": True},
        headers=headers,
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_assignment_and_topic(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, (ana, _) = await seed_class()
    headers = auth_headers()
    topic = (await client.post(_url(class_id, "/topics"), json={"name": "Poems"}, headers=headers)).json()
    assignment = (await client.post(_url(class_id, "/assignments"), json={"name": "Poem"}, headers=headers)).json()
    await client.put(
        _url(class_id, f"/assignments/{assignment['id']}/students/{ana}"), json={"complete": True}, headers=headers
    )

    assert (await client.delete(_url(class_id, f"/assignments/{assignment['id']}"), headers=headers)).status_code == 204
    assert (await client.delete(_url(class_id, f"/topics/{topic['id']}"), headers=headers)).status_code == 204
    assert (await client.get(_url(class_id, "/assignments"), headers=headers)).json() == []
    assert (await client.get(_url(class_id, "/topics"), headers=headers)).json() == []


# ----- Expectations -----
@pytest.mark.asyncio
async def test_student_expectation_upsert(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, (ana, _) = await seed_class()
    headers = auth_headers()
    expectation = (
        await client.post(_url(class_id, "/expectations"), json={"name": "Homework on time"}, headers=headers)
    ).json()
    value_url = _url(class_id, f"/expectations/{expectation['id']}/students/{ana}")

    first = await client.put(value_url, json={"value": "Mostly"}, headers=headers)
    second = await client.put(value_url, json={"number": 4}, headers=headers)

    assert first.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["value"] == "Mostly"
    assert second.json()["number"] == 4


@pytest.mark.asyncio
async def test_delete_expectation_removes_student_values(
    client: AsyncClient,
    db_session: AsyncSession,
    seed_class,
    auth_headers,
) -> None:
    class_id, (ana, _) = await seed_class()
    headers = auth_headers()
    expectation = (await client.post(_url(class_id, "/expectations"), json={"name": "Reading"}, headers=headers)).json()
    await client.put(
        _url(class_id, f"/expectations/{expectation['id']}/students/{ana}"), json={"number": 2}, headers=headers
    )

    response = await client.delete(_url(class_id, f"/expectations/{expectation['id']}"), headers=headers)

    assert response.status_code == 204
    assert (await db_session.execute(select(StudentExpectation))).scalars().all() == []


@pytest.mark.asyncio
async def test_rename_expectation(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class()
    headers = auth_headers()
    expectation = (await client.post(_url(class_id, "/expectations"), json={"name": "Reading"}, headers=headers)).json()

    response = await client.patch(
        _url(class_id, f"/expectations/{expectation['id']}"), json={"name": "Reading log"}, headers=headers
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Reading log"
