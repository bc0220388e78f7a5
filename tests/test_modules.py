"""
Tests for check-ins, goals, plants and plant photos
"""

from datetime import datetime

from conftest import bearer


def test_check_in_defaults_member_to_caller(client, group):
    response = client.post(
        "/api/v1/checkins",
        json={"groupId": group["id"], "mood": "happy", "note": "Beach day"},
        headers=bearer("bob"),
    )
    assert response.status_code == 201
    check_in = response.json()
    assert check_in["memberId"] == "bob"
    assert datetime.fromisoformat(check_in["timestamp"].replace("Z", "+00:00"))

    listed = client.get("/api/v1/checkins", params={"groupId": group["id"]}, headers=bearer("alice")).json()
    assert [c["id"] for c in listed] == [check_in["id"]]


def test_check_in_requires_note(client, db, group):
    response = client.post("/api/v1/checkins", json={"groupId": group["id"], "mood": "ok"}, headers=bearer("bob"))
    assert response.status_code == 400
    assert db.rows("check_ins") == []


def test_check_in_without_group_is_400(client):
    response = client.get("/api/v1/checkins", headers=bearer("bob"))
    assert response.status_code == 400
    assert response.json() == {"error": "groupId is required"}


def test_questions(client, group):
    created = client.post(
        "/api/v1/checkins/questions",
        json={"groupId": group["id"], "text": "Best part of today?", "topic": "daily"},
        headers=bearer("alice"),
    ).json()
    assert created["isActive"] is True
    assert created["createdBy"] == "alice"
    listed = client.get("/api/v1/checkins/questions", params={"groupId": group["id"]}, headers=bearer("bob")).json()
    assert [q["text"] for q in listed] == ["Best part of today?"]


def test_check_in_members_roles(client, db, group):
    db.seed("users", id="alice", name="Alice", email="alice@example.com")
    db.seed("users", id="bob", name=None, email="bob@example.com")
    members = client.get("/api/v1/checkins/members", params={"groupId": group["id"]}, headers=bearer("bob")).json()
    assert {m["id"]: (m["name"], m["role"]) for m in members} == {
        "alice": ("Alice", "Parent"),
        "bob": ("bob@example.com", "Child"),
    }


def test_goal_lifecycle(client, group):
    created = client.post(
        "/api/v1/goals",
        json={"groupId": group["id"], "title": "Read 10 books", "ownerId": "bob", "type": "personal", "timeframe": "year"},
        headers=bearer("bob"),
    )
    assert created.status_code == 201
    goal = created.json()
    assert goal["description"] == ""
    assert goal["progress"] == 0

    updated = client.patch(f"/api/v1/goals/{goal['id']}", json={"progress": 40}, headers=bearer("alice")).json()
    assert updated["progress"] == 40
    assert updated["title"] == "Read 10 books"
    assert updated["updatedAt"] is not None

    assert client.delete(f"/api/v1/goals/{goal['id']}", headers=bearer("mallory")).status_code == 403
    assert client.delete(f"/api/v1/goals/{goal['id']}", headers=bearer("bob")).status_code == 204
    assert client.patch(f"/api/v1/goals/{goal['id']}", json={"progress": 50}, headers=bearer("bob")).status_code == 404


def test_goal_accepts_snake_case_keys(client, group):
    response = client.post(
        "/api/v1/goals",
        json={"group_id": group["id"], "title": "Save", "owner_id": "alice", "type": "family", "timeframe": "month"},
        headers=bearer("alice"),
    )
    assert response.status_code == 201
    assert response.json()["ownerId"] == "alice"


def test_plant_watering(client, group):
    plant = client.post(
        "/api/v1/plants", json={"groupId": group["id"], "name": "Fern", "location": "Hall"}, headers=bearer("bob")
    ).json()
    assert plant["lastWatered"] is None

    watered = client.post(f"/api/v1/plants/{plant['id']}/water", headers=bearer("alice")).json()
    assert watered["lastWatered"] is not None

    fetched = client.get(f"/api/v1/plants/{plant['id']}", headers=bearer("bob"))
    assert fetched.json()["name"] == "Fern"
    assert client.get(f"/api/v1/plants/{plant['id']}", headers=bearer("carol")).status_code == 403


def test_plant_identification(client, gemini):
    gemini.plant = {"commonName": "Snake plant", "recommendedWaterSchedule": "When soil is dry", "confidence": "high"}
    response = client.post(
        "/api/v1/plants/identify", json={"imageBase64": "data:image/jpeg;base64,AAAA"}, headers=bearer("bob")
    )
    assert response.status_code == 200
    assert response.json()["commonName"] == "Snake plant"


def test_plant_identification_rejects_plain_base64(client):
    response = client.post("/api/v1/plants/identify", json={"imageBase64": "AAAA"}, headers=bearer("bob"))
    assert response.status_code == 400


def test_unusable_identification_is_500(client, gemini):
    gemini.plant = {"confidence": "low"}
    response = client.post(
        "/api/v1/plants/identify", json={"imageBase64": "data:image/jpeg;base64,AAAA"}, headers=bearer("bob")
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to identify plant from image"}


def test_health_probes(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/ready").json() == {"status": "ready"}
    assert client.get("/").json()["message"] == "Welcome to familyhub-backend"


def test_check_in_for_another_member(client, db, group):
    for_alice = client.post(
        "/api/v1/checkins",
        json={"groupId": group["id"], "memberId": "alice", "mood": "tired", "note": "Long shift"},
        headers=bearer("bob"),
    )
    assert for_alice.status_code == 201
    assert for_alice.json()["memberId"] == "alice"

    for_outsider = client.post(
        "/api/v1/checkins",
        json={"groupId": group["id"], "memberId": "mallory", "mood": "ok", "note": "Hi"},
        headers=bearer("bob"),
    )
    assert for_outsider.status_code == 400
    assert for_outsider.json() == {"error": "memberId must be an active member of this group"}
    assert len(db.rows("check_ins")) == 1


def test_question_author_is_the_caller(client, db, group):
    created = client.post(
        "/api/v1/checkins/questions",
        json={"groupId": group["id"], "text": "Highlight?", "topic": "daily", "createdBy": "mallory"},
        headers=bearer("bob"),
    ).json()
    assert created["createdBy"] == "bob"
    assert db.rows("questions")[0]["created_by"] == "bob"


def test_goal_owner_must_be_active_member(client, db, group):
    for owner in ("mallory", "carol"):
        response = client.post(
            "/api/v1/goals",
            json={"groupId": group["id"], "title": "Run", "ownerId": owner, "type": "health", "timeframe": "month"},
            headers=bearer("alice"),
        )
        assert response.status_code == 400
        assert response.json() == {"error": "ownerId must be an active member of this group"}
    assert db.rows("goals") == []

    goal = db.seed(
        "goals", group_id=group["id"], title="Run", owner_id="bob", type="health", timeframe="month", progress=0
    )
    moved = client.patch(f"/api/v1/goals/{goal['id']}", json={"ownerId": "mallory"}, headers=bearer("alice"))
    assert moved.status_code == 400
    assert db.rows("goals")[0]["owner_id"] == "bob"
    handed_over = client.patch(f"/api/v1/goals/{goal['id']}", json={"ownerId": "alice"}, headers=bearer("bob"))
    assert handed_over.json()["ownerId"] == "alice"


def test_goal_update_rejects_null_and_out_of_range(client, db, group):
    goal = db.seed(
        "goals", group_id=group["id"], title="Save", owner_id="alice", type="family", timeframe="year", progress=10
    )
    for body in ({"title": None}, {"ownerId": None}, {"progress": None}, {"progress": 101}, {"timeframe": ""}):
        response = client.patch(f"/api/v1/goals/{goal['id']}", json=body, headers=bearer("alice"))
        assert response.status_code == 400, body
    stored = db.rows("goals")[0]
    assert (stored["title"], stored["owner_id"], stored["progress"], stored["timeframe"]) == ("Save", "alice", 10, "year")

    cleared = client.patch(f"/api/v1/goals/{goal['id']}", json={"description": None}, headers=bearer("alice"))
    assert cleared.status_code == 200
    assert cleared.json()["description"] == ""


def test_plant_update_rejects_null_name(client, db, group):
    plant = db.seed("plants", group_id=group["id"], user_id="bob", name="Fern")
    response = client.patch(f"/api/v1/plants/{plant['id']}", json={"name": None}, headers=bearer("bob"))
    assert response.status_code == 400
    assert db.rows("plants")[0]["name"] == "Fern"

    relocated = client.patch(f"/api/v1/plants/{plant['id']}", json={"location": None}, headers=bearer("bob"))
    assert relocated.status_code == 200
    assert relocated.json()["location"] is None


def test_plant_photos(client, db, group):
    plant = db.seed("plants", group_id=group["id"], user_id="bob", name="Fern")
    url = f"/api/v1/plants/{plant['id']}/photos"

    older = client.post(
        url, json={"imageUrl": "https://img.example/1.jpg", "photoDate": "2026-05-01T09:00:00Z"}, headers=bearer("bob")
    )
    assert older.status_code == 201
    newer = client.post(url, json={"imageUrl": "https://img.example/2.jpg"}, headers=bearer("alice")).json()
    assert newer["photoDate"] is not None

    listed = client.get(url, headers=bearer("alice")).json()
    assert [p["imageUrl"] for p in listed] == ["https://img.example/2.jpg", "https://img.example/1.jpg"]

    assert client.post(url, json={}, headers=bearer("bob")).status_code == 400
    assert client.get(url, headers=bearer("mallory")).status_code == 403

    other = db.seed("plants", group_id=group["id"], user_id="alice", name="Cactus")
    wrong_plant = client.delete(f"/api/v1/plants/{other['id']}/photos/{newer['id']}", headers=bearer("bob"))
    assert wrong_plant.status_code == 404
    assert wrong_plant.json() == {"error": "Photo not found"}

    assert client.delete(f"{url}/{newer['id']}", headers=bearer("bob")).status_code == 204
    assert [p["image_url"] for p in db.rows("plant_photos")] == ["https://img.example/1.jpg"]


def test_plant_photos_table_missing(client, db, group):
    plant = db.seed("plants", group_id=group["id"], user_id="bob", name="Fern")
    db.missing_tables.add("plant_photos")
    response = client.get(f"/api/v1/plants/{plant['id']}/photos", headers=bearer("bob"))
    assert response.status_code == 503
    assert response.json() == {"error": "Plant photos table does not exist. Please run the plants migration."}
