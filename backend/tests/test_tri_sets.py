"""Tests for tri-sets API: registration rules and listing."""

import pytest
from httpx import AsyncClient


async def _post(client, headers, **body):
    return await client.post("/api/v1/tri-sets", json=body, headers=headers)


@pytest.mark.asyncio
async def test_create_single_and_dual_phase(client: AsyncClient, auth_headers: dict, add_exercises):
    ids = await add_exercises(1, "Technique", 6, focus="Mixed")
    resp = await _post(client, auth_headers, focus="Mixed", exercise_ids=ids[:3], name="Jab set")
    assert resp.status_code == 201, resp.text
    single = resp.json()
    assert single["phase2_exercise_ids"] == []
    assert single["display_name"] == "Jab set"
    assert [s["exercise_id"] for s in single["phase1"]] == ids[:3]

    resp = await _post(client, auth_headers, focus="Mixed", exercise_ids=ids[:3], phase2_exercise_ids=ids[3:])
    assert resp.status_code == 201
    dual = resp.json()
    assert dual["phase2_exercise_ids"] == ids[3:]
    assert dual["display_name"] == " → ".join(s["name"] for s in dual["phase1"])


@pytest.mark.asyncio
async def test_concept_wins_display_name(client: AsyncClient, auth_headers: dict, add_exercises):
    ids = await add_exercises(1, "Technique", 3, focus="Lower")
    resp = await _post(client, auth_headers, focus="Lower", exercise_ids=ids, name="n", concept="Level changes")
    assert resp.json()["display_name"] == "Level changes"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "phase1,phase2,message",
    [
        (slice(0, 2), slice(0, 0), "Phase 1 must have exactly 3"),
        (slice(0, 3), slice(3, 5), "Phase 2 must have exactly 3"),
        (slice(0, 3), slice(2, 5), "must not share"),
    ],
)
async def test_create_rejects_bad_groups(
    client: AsyncClient, auth_headers: dict, add_exercises, phase1, phase2, message
):
    ids = await add_exercises(1, "Technique", 6, focus="Mixed")
    resp = await _post(client, auth_headers, focus="Mixed", exercise_ids=ids[phase1], phase2_exercise_ids=ids[phase2])
    assert resp.status_code == 400
    assert message in resp.json()["error"]


@pytest.mark.asyncio
async def test_create_rejects_repeated_exercise(client: AsyncClient, auth_headers: dict, add_exercises):
    ids = await add_exercises(1, "Technique", 2, focus="Mixed")
    resp = await _post(client, auth_headers, focus="Mixed", exercise_ids=[ids[0], ids[1], ids[0]])
    assert resp.status_code == 400
    assert "must not repeat" in resp.json()["error"]


@pytest.mark.asyncio
async def test_create_rejects_wrong_focus(client: AsyncClient, auth_headers: dict, add_exercises):
    ids = await add_exercises(1, "Technique", 3, focus="Mixed")
    resp = await _post(client, auth_headers, focus="Lower", exercise_ids=ids)
    assert resp.status_code == 400
    assert "must have focus Lower" in resp.json()["error"]


@pytest.mark.asyncio
async def test_create_rejects_non_technique_station1(client: AsyncClient, auth_headers: dict, add_exercises):
    ids = await add_exercises(1, "Kickboxing", 3, focus="Mixed")
    resp = await _post(client, auth_headers, focus="Mixed", exercise_ids=ids)
    assert resp.status_code == 400
    assert "Station 1, Technique" in resp.json()["error"]


@pytest.mark.asyncio
async def test_create_rejects_unknown_exercise(client: AsyncClient, auth_headers: dict, add_exercises):
    ids = await add_exercises(1, "Technique", 2, focus="Mixed")
    resp = await _post(client, auth_headers, focus="Mixed", exercise_ids=[*ids, 987654])
    assert resp.status_code == 400
    assert resp.json()["error"] == "All exercises must exist and belong to you"


@pytest.mark.asyncio
async def test_create_rejects_bad_focus_tag(client: AsyncClient, auth_headers: dict, add_exercises):
    ids = await add_exercises(1, "Technique", 3, focus="Mixed")
    resp = await _post(client, auth_headers, focus="Upper", exercise_ids=ids)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_list_filters_by_focus(client: AsyncClient, auth_headers: dict, add_exercises):
    mixed = await add_exercises(1, "Technique", 3, focus="Full Body")
    lower = await add_exercises(1, "Technique", 3, focus="Lower")
    await _post(client, auth_headers, focus="Mixed", exercise_ids=mixed)
    await _post(client, auth_headers, focus="Lower", exercise_ids=lower)
    resp = await client.get("/api/v1/tri-sets", headers=auth_headers)
    assert len(resp.json()) == 2
    resp = await client.get("/api/v1/tri-sets?focus=Lower", headers=auth_headers)
    assert [t["exercise_ids"] for t in resp.json()] == [lower]
