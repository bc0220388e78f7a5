"""
Tests for the group-scoped access checks
"""

import pytest

from conftest import bearer
from familyhub.core.access import AccessGateway
from familyhub.core.errors import Forbidden, NotFound, ValidationFailed


def test_active_member_is_authorized(db, group):
    gateway = AccessGateway(db)
    membership = gateway.authorize_group_access({"id": "bob"}, group["id"])
    assert membership["role"] == "Member"


def test_deactivated_member_is_refused(db, group):
    gateway = AccessGateway(db)
    with pytest.raises(Forbidden):
        gateway.authorize_group_access({"id": "carol"}, group["id"])


def test_stranger_is_refused(db, group):
    with pytest.raises(Forbidden):
        AccessGateway(db).authorize_group_access({"id": "mallory"}, group["id"])


def test_missing_group_id_is_a_validation_error(db):
    with pytest.raises(ValidationFailed):
        AccessGateway(db).authorize_group_access({"id": "alice"}, None)


def test_admin_action_requires_admin_role(db, group):
    gateway = AccessGateway(db)
    assert gateway.authorize_admin_action({"id": "alice"}, group["id"])["role"] == "Admin"
    with pytest.raises(Forbidden):
        gateway.authorize_admin_action({"id": "bob"}, group["id"])


def test_personal_access_requires_ownership(db):
    gateway = AccessGateway(db)
    gateway.authorize_personal_access({"id": "alice"}, "alice")
    with pytest.raises(Forbidden):
        gateway.authorize_personal_access({"id": "alice"}, "bob")
    with pytest.raises(Forbidden):
        gateway.authorize_personal_access({"id": "alice"}, None)


def test_blank_scope_is_personal(db):
    assert AccessGateway(db).authorize_scope({"id": "alice"}, "  ") is None


def test_authorize_record_follows_owner_column(db, group):
    gateway = AccessGateway(db)
    shared = db.seed("tasks", title="Shared", user_id="alice", group_id=group["id"])
    private = db.seed("tasks", title="Mine", user_id="alice", group_id=None)

    assert gateway.authorize_record({"id": "bob"}, "tasks", shared["id"], user_column="user_id")["title"] == "Shared"
    with pytest.raises(Forbidden):
        gateway.authorize_record({"id": "bob"}, "tasks", private["id"], user_column="user_id")
    with pytest.raises(NotFound):
        gateway.authorize_record({"id": "bob"}, "tasks", "no-such-task", "Todo", user_column="user_id")


def test_missing_token_is_401(client, group):
    response = client.get("/api/v1/checkins", params={"groupId": group["id"]})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_invalid_token_is_401(client, group):
    response = client.get("/api/v1/checkins", params={"groupId": group["id"]}, headers=bearer("invalid-token"))
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_non_member_cannot_read_check_ins(client, db, group):
    db.seed("check_ins", group_id=group["id"], member_id="alice", mood="happy", note="Good day")
    response = client.get("/api/v1/checkins", params={"groupId": group["id"]}, headers=bearer("mallory"))
    assert response.status_code == 403
    assert response.json() == {"error": "Forbidden: Not a member of this group"}


def test_deactivation_revokes_access(client, group):
    params = {"groupId": group["id"]}
    assert client.get("/api/v1/checkins", params=params, headers=bearer("bob")).status_code == 200

    response = client.delete(f"/api/v1/groups/{group['id']}/members/bob", headers=bearer("alice"))
    assert response.status_code == 204

    assert client.get("/api/v1/checkins", params=params, headers=bearer("bob")).status_code == 403
