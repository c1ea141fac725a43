"""Tests for exercises API: dropdown list, tri-set builder options, catalog maintenance."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_and_get_exercise(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/exercises",
        json={"name": "Shadow Boxing", "station": 2, "day_type": "Boxing"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Shadow Boxing"
    assert data["last_used"] is None
    resp = await client.get(f"/api/v1/exercises/{data['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["station"] == 2


@pytest.mark.asyncio
async def test_create_exercise_rejects_bad_station(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/exercises",
        json={"name": "Rope", "station": 5, "day_type": "Boxing"},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert "error" in resp.json()


@pytest.mark.asyncio
async def test_create_exercise_rejects_blank_name(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/exercises",
        json={"name": "   ", "station": 2, "day_type": "Boxing"},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Exercise name must not be blank"


@pytest.mark.asyncio
async def test_list_dedupes_names_by_default(client: AsyncClient, auth_headers: dict):
    for name in ("Flutter Kicks", "flutter kick", "Burpees"):
        await client.post(
            "/api/v1/exercises",
            json={"name": name, "station": 1, "day_type": "Conditioning", "focus": "Abs"},
            headers=auth_headers,
        )
    resp = await client.get("/api/v1/exercises?station=1&day_type=Conditioning", headers=auth_headers)
    assert sorted(e["name"] for e in resp.json()) == ["Burpees", "Flutter Kicks"]
    resp = await client.get("/api/v1/exercises?station=1&day_type=Conditioning&dedupe=false", headers=auth_headers)
    assert len(resp.json()) == 3


@pytest.mark.asyncio
async def test_list_station2_needs_day_type(client: AsyncClient, auth_headers: dict, add_exercises):
    await add_exercises(2, "Boxing", 2)
    resp = await client.get("/api/v1/exercises?station=2", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == []
    resp = await client.get("/api/v1/exercises?station=2&day_type=Boxing", headers=auth_headers)
    assert len(resp.json()) == 2


@pytest.mark.asyncio
async def test_list_filters_station1_focus(client: AsyncClient, auth_headers: dict, add_exercises):
    await add_exercises(1, "Kickboxing", 2, focus="Upper")
    await add_exercises(1, "Kickboxing", 3, focus="Lower")
    resp = await client.get("/api/v1/exercises?station=1&day_type=Kickboxing&focus=Lower", headers=auth_headers)
    assert len(resp.json()) == 3
    resp = await client.get(
        "/api/v1/exercises?station=1&day_type=Kickboxing&focus=Lower&focus=Upper", headers=auth_headers
    )
    assert len(resp.json()) == 5


@pytest.mark.asyncio
async def test_station1_for_day(client: AsyncClient, auth_headers: dict, add_exercises):
    await add_exercises(1, "Technique", 2, focus="Mixed")
    await add_exercises(1, "Technique", 1, focus="Full Body")
    await add_exercises(1, "Technique", 4, focus="Lower")
    await add_exercises(1, "Kickboxing", 2, focus="Mixed")
    resp = await client.get("/api/v1/exercises/station1-for-day?day_of_week=Monday", headers=auth_headers)
    assert resp.status_code == 200
    assert len(resp.json()) == 3
    resp = await client.get("/api/v1/exercises/station1-for-day?day_of_week=Saturday", headers=auth_headers)
    assert len(resp.json()) == 4
    resp = await client.get("/api/v1/exercises/station1-for-day?day_of_week=Sunday", headers=auth_headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_update_does_not_touch_last_used(client: AsyncClient, auth_headers: dict, add_exercises):
    await add_exercises(1, "Conditioning", 6, focus="Lower")
    await add_exercises(2, "Conditioning", 3)
    resp = await client.post(
        "/api/v1/workouts/generate",
        json={"day_of_week": "Wednesday", "week_start_date": "2026-10-18"},
        headers=auth_headers,
    )
    assert resp.status_code == 201, resp.text
    ex_id = resp.json()["station2"][0]["exercise_id"]
    before = (await client.get(f"/api/v1/exercises/{ex_id}", headers=auth_headers)).json()
    assert before["last_used"] is not None

    resp = await client.put(
        f"/api/v1/exercises/{ex_id}", json={"name": "Renamed Drill", "last_used": None}, headers=auth_headers
    )
    assert resp.status_code == 200
    after = resp.json()
    assert after["name"] == "Renamed Drill"
    assert after["last_used"] == before["last_used"]


@pytest.mark.asyncio
async def test_delete_exercise_keeps_workout_snapshot(client: AsyncClient, auth_headers: dict, add_exercises):
    await add_exercises(1, "Conditioning", 6, focus="Lower")
    await add_exercises(2, "Conditioning", 3)
    workout = (
        await client.post(
            "/api/v1/workouts/generate",
            json={"day_of_week": "Wednesday", "week_start_date": "2026-10-18"},
            headers=auth_headers,
        )
    ).json()
    slot = workout["station2"][0]
    resp = await client.delete(f"/api/v1/exercises/{slot['exercise_id']}", headers=auth_headers)
    assert resp.status_code == 204
    resp = await client.get(f"/api/v1/exercises/{slot['exercise_id']}", headers=auth_headers)
    assert resp.status_code == 404
    after = (await client.get(f"/api/v1/workouts/{workout['id']}", headers=auth_headers)).json()
    assert after["station2"][0] == slot


@pytest.mark.asyncio
async def test_exercises_are_owner_scoped(
    client: AsyncClient, auth_headers: dict, other_headers: dict, add_exercises
):
    [ex_id] = await add_exercises(2, "Boxing", 1)
    resp = await client.get(f"/api/v1/exercises/{ex_id}", headers=other_headers)
    assert resp.status_code == 404
    resp = await client.get("/api/v1/exercises?station=2&day_type=Boxing", headers=other_headers)
    assert resp.json() == []


@pytest.mark.asyncio
async def test_update_rejects_null_required_fields(client: AsyncClient, auth_headers: dict, add_exercises):
    [ex_id] = await add_exercises(2, "Boxing", 1)
    for field in ("day_type", "is_static", "station", "name"):
        resp = await client.put(f"/api/v1/exercises/{ex_id}", json={field: None}, headers=auth_headers)
        assert resp.status_code == 400, field
        assert field in resp.json()["error"]
    after = (await client.get(f"/api/v1/exercises/{ex_id}", headers=auth_headers)).json()
    assert after["day_type"] == "Boxing"
    assert after["station"] == 2
    assert after["is_static"] is False


@pytest.mark.asyncio
async def test_update_clears_optional_fields(client: AsyncClient, auth_headers: dict, add_exercises):
    [ex_id] = await add_exercises(1, "Boxing", 1, focus="Upper")
    resp = await client.put(f"/api/v1/exercises/{ex_id}", json={"focus": None}, headers=auth_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["focus"] is None
