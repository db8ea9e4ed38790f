import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import StudentGroup, StudentSubGroup, SubGroup


def _url(class_id: str, suffix: str = "") -> str:
    return f"/api/v1/classes/{class_id}/groups{suffix}"


@pytest.mark.asyncio
async def test_create_group_keeps_enrolled_members_only(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, (ana, ben) = await seed_class()

    response = await client.post(
        _url(class_id),
        json={"group_name": "Red", "student_ids": [ana, "student_elsewhere", ben, ana]},
        headers=auth_headers(),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["group_name"] == "Red"
    assert sorted(data["student_ids"]) == sorted([ana, ben])
    assert data["sub_groups"] == []


@pytest.mark.asyncio
async def test_update_group_replaces_membership(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, (ana, ben) = await seed_class()
    headers = auth_headers()
    group = (await client.post(_url(class_id), json={"group_name": "Red", "student_ids": [ana]}, headers=headers)).json()

    response = await client.put(
        _url(class_id, f"/{group['group_id']}"),
        json={"group_name": "Blue", "student_ids": [ben]},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["group_name"] == "Blue"
    assert response.json()["student_ids"] == [ben]


@pytest.mark.asyncio
async def test_sub_groups_and_group_delete(
    client: AsyncClient,
    db_session: AsyncSession,
    seed_class,
    auth_headers,
) -> None:
    class_id, (ana, ben) = await seed_class()
    headers = auth_headers()
    group = (
        await client.post(_url(class_id), json={"group_name": "Red", "student_ids": [ana, ben]}, headers=headers)
    ).json()

    created = await client.post(
        _url(class_id, f"/{group['group_id']}/sub-groups"),
        json={"sub_group_name": "Red A", "student_ids": [ana]},
        headers=headers,
    )
    assert created.status_code == 201
    sub_group_id = created.json()["sub_group_id"]

    updated = await client.put(
        _url(class_id, f"/{group['group_id']}/sub-groups/{sub_group_id}"),
        json={"student_ids": [ben]},
        headers=headers,
    )
    assert updated.json()["student_ids"] == [ben]

    listed = await client.get(_url(class_id), headers=headers)
    assert [s["sub_group_name"] for s in listed.json()[0]["sub_groups"]] == ["Red A"]

    deleted = await client.delete(_url(class_id, f"/{group['group_id']}"), headers=headers)
    assert deleted.status_code == 204
    for model in (StudentGroup, StudentSubGroup, SubGroup):
        count = (await db_session.execute(select(func.count()).select_from(model))).scalar_one()
        assert count == 0


@pytest.mark.asyncio
async def test_unknown_group_is_not_found(client: AsyncClient, seed_class, auth_headers) -> None:
    class_id, _ = await seed_class()

    response = await client.put(_url(class_id, "/group_missing"), json={"group_name": "X"}, headers=auth_headers())

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_assistant_cannot_edit_groups(
    client: AsyncClient,
    seed_class,
    auth_headers,
) -> None:
    class_id, _ = await seed_class(user_id="teacher-2", role="assistant")

    response = await client.post(_url(class_id), json={"group_name": "Red"}, headers=auth_headers("teacher-2"))

    assert response.status_code == 403
