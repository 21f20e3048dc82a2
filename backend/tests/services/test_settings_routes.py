"""Settings & User Routes — verifies HTTP status mapping over the real app.

Invariants:
    - Missing X-User-Id is a 401 before any service runs
    - Duplicate names are 409, missing settings 404, unknown catalog kind 400
    - Success bodies carry {success, user, data}
"""

ALICE = {"X-User-Id": "auth0|alice"}


async def _register(client, headers=ALICE):
    response = await client.post("/api/v1/users", headers=headers)
    assert response.status_code == 201
    return response.json()


# --- Health & identity ------------------------------------------------------

async def test_health_probes(client):
    live = await client.get("/api/v1/health/")
    assert live.status_code == 200
    assert live.json()["status"] == "healthy"

    ready = await client.get("/api/v1/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["database"] == "healthy"


async def test_missing_identity_is_unauthorised(client):
    response = await client.get("/api/v1/settings")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"


# --- Users ------------------------------------------------------------------

async def test_register_then_conflict(client):
    body = await _register(client)
    assert body["data"]["user"] == "auth0|alice"
    assert body["data"]["setup_status"] == "incomplete"

    again = await client.post("/api/v1/users", headers=ALICE)
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "RESOURCE_EXISTS"


async def test_profile_and_delete(client):
    await _register(client)
    profile = await client.get("/api/v1/users/me", headers=ALICE)
    assert profile.status_code == 200
    assert profile.json()["data"]["user"] == "auth0|alice"

    deleted = await client.delete("/api/v1/users/me", headers=ALICE)
    assert deleted.status_code == 200
    assert deleted.json()["data"] == {"user": "auth0|alice", "deleted_entries": 0}

    missing = await client.get("/api/v1/users/me", headers=ALICE)
    assert missing.status_code == 404


# --- Settings ---------------------------------------------------------------

async def test_settings_for_unregistered_caller_is_not_found(client):
    response = await client.get("/api/v1/settings", headers=ALICE)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_add_and_list_tags(client):
    await _register(client)
    added = await client.post(
        "/api/v1/settings/tags",
        json={"items": [{"name": "Home", "type": "General Activity"}]},
        headers=ALICE,
    )
    assert added.status_code == 201
    body = added.json()
    assert body["success"] is True
    assert body["user"] == "auth0|alice"
    (home,) = body["data"]

    listed = await client.get("/api/v1/settings/tags", headers=ALICE)
    assert listed.json()["data"] == [home]


async def test_duplicate_tag_is_conflict(client):
    await _register(client)
    payload = {"items": [{"name": "Home", "type": "General Activity"}]}
    await client.post("/api/v1/settings/tags", json=payload, headers=ALICE)
    response = await client.post("/api/v1/settings/tags", json=payload, headers=ALICE)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_NAME"
    assert "Home" in response.json()["error"]["message"]


async def test_invalid_activity_type_is_bad_request(client):
    await _register(client)
    response = await client.post(
        "/api/v1/settings/activities",
        json={"items": [{"name": "Boxing", "type": "Exercise"}]},
        headers=ALICE,
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TYPE"


async def test_unknown_catalog_kind_is_bad_request(client):
    await _register(client)
    response = await client.get("/api/v1/settings/moods", headers=ALICE)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_delete_tags_with_body(client):
    await _register(client)
    added = await client.post(
        "/api/v1/settings/tags",
        json={"items": [{"name": "Home", "type": "General Activity"},
                        {"name": "Work", "type": "General Activity"}]},
        headers=ALICE,
    )
    home, work = added.json()["data"]

    response = await client.request(
        "DELETE", "/api/v1/settings/tags", json={"ids": [home["id"]]}, headers=ALICE,
    )
    assert response.status_code == 200
    assert response.json()["data"] == [home["id"]]

    listed = await client.get("/api/v1/settings/tags", headers=ALICE)
    assert listed.json()["data"] == [work]


async def test_setup_status_requires_bool(client):
    await _register(client)
    bad = await client.put("/api/v1/settings/status", json={"status": "yes"}, headers=ALICE)
    assert bad.status_code == 400

    ok = await client.put("/api/v1/settings/status", json={"status": True}, headers=ALICE)
    assert ok.status_code == 200
    assert ok.json()["data"] == {"setup_complete": True}


async def test_reflection_alert_route(client):
    await _register(client)
    response = await client.put(
        "/api/v1/settings/reflection-alert",
        json={"enabled": True, "alert_time": "07:45"},
        headers=ALICE,
    )
    assert response.status_code == 200
    assert response.json()["data"] == {
        "reflection_alert_enabled": True, "reflection_alert_time": "07:45",
    }


async def test_tag_in_use_route(client):
    await _register(client)
    added = await client.post(
        "/api/v1/settings/tags",
        json={"items": [{"name": "Home", "type": "General Activity"}]},
        headers=ALICE,
    )
    (home,) = added.json()["data"]
    await client.post(
        "/api/v1/entries",
        json={"mood": "Low Energy, Pleasant", "emotion": "Calm", "text": "Tea",
              "tags": [{"id": home["id"], "name": "Home"}]},
        headers=ALICE,
    )
    response = await client.get(f"/api/v1/settings/tags/{home['id']}/in-use", headers=ALICE)
    assert response.json()["data"] == {"in_use": True}
