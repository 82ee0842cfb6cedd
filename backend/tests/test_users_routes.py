"""
Tests for api/v1/users.py — the /users routes end to end.
"""

from __future__ import annotations

import pytest

from app.core.security import create_access_token

from conftest import TEST_ZPIDS, auth_header, drop_tables

UNAUTHORIZED_BODY = {"error": {"message": "Unauthorized", "status": 401}}


# -----------------------------------------------------------------------------
# GET /users/{username}
# -----------------------------------------------------------------------------

def test_get_user_works_for_same_user(client, user_token, test_user_id):
    resp = client.get("/users/testuser", headers=auth_header(user_token))

    assert resp.status_code == 200
    assert resp.json() == {
        "user": {
            "id": test_user_id,
            "username": "testuser",
            "firstName": "Test",
            "lastName": "User",
            "email": "test@test.com",
            "favoritedProperties": [TEST_ZPIDS[0]],
        }
    }


def test_get_user_unauth_for_other_users(client, user2_token):
    resp = client.get("/users/testuser", headers=auth_header(user2_token))

    assert resp.status_code == 401
    assert resp.json() == UNAUTHORIZED_BODY


def test_get_user_unauth_for_anon(client):
    resp = client.get("/users/testuser")

    assert resp.status_code == 401


def test_get_user_unauth_for_bad_token(client):
    resp = client.get("/users/testuser", headers=auth_header("not-a-jwt"))

    assert resp.status_code == 401


def test_get_user_unauth_for_expired_token(client):
    token = create_access_token({"username": "testuser"}, expires_minutes=-5)

    resp = client.get("/users/testuser", headers=auth_header(token))

    assert resp.status_code == 401


def test_get_user_storage_failure(client, db, user_token):
    drop_tables(db)

    resp = client.get("/users/testuser", headers=auth_header(user_token))

    assert resp.status_code == 500
    assert resp.json()["error"]["status"] == 500


def test_get_user_not_found_for_deleted_self(client, user_token):
    client.delete("/users/testuser", headers=auth_header(user_token))

    resp = client.get("/users/testuser", headers=auth_header(user_token))

    assert resp.status_code == 404
    assert resp.json() == {"error": {"message": "No user: testuser", "status": 404}}


# -----------------------------------------------------------------------------
# PATCH /users/{username}
# -----------------------------------------------------------------------------

def test_patch_user_works_for_same_user(client, user_token):
    resp = client.patch(
        "/users/testuser", json={"firstName": "New"}, headers=auth_header(user_token)
    )

    assert resp.status_code == 200
    assert resp.json() == {
        "user": {
            "username": "testuser",
            "firstName": "New",
            "lastName": "User",
            "email": "test@test.com",
        }
    }


def test_patch_user_unauth_if_not_same_user(client, user2_token):
    resp = client.patch(
        "/users/testuser", json={"firstName": "New"}, headers=auth_header(user2_token)
    )

    assert resp.status_code == 401


def test_patch_user_unauth_for_anon(client):
    resp = client.patch("/users/testuser", json={"firstName": "New"})

    assert resp.status_code == 401


def test_patch_user_bad_request_if_invalid_data(client, user_token):
    resp = client.patch("/users/testuser", json={"firstName": 42}, headers=auth_header(user_token))

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"]["status"] == 400
    assert any("firstName" in message for message in body["error"]["message"])


def test_patch_user_bad_request_for_unknown_field(client, user_token):
    resp = client.patch(
        "/users/testuser", json={"username": "renamed"}, headers=auth_header(user_token)
    )

    assert resp.status_code == 400


def test_patch_user_bad_request_if_empty(client, user_token):
    resp = client.patch("/users/testuser", json={}, headers=auth_header(user_token))

    assert resp.status_code == 400


def test_patch_user_bad_request_for_null_field(client, repo, user_token):
    resp = client.patch(
        "/users/testuser",
        json={"firstName": None, "email": "new@test.com"},
        headers=auth_header(user_token),
    )

    assert resp.status_code == 400
    assert any("firstName" in message for message in resp.json()["error"]["message"])
    user = repo.get("testuser").value
    assert user["firstName"] == "Test"
    assert user["email"] == "test@test.com"


def test_patch_user_can_set_new_password(client, repo, user_token):
    resp = client.patch(
        "/users/testuser", json={"password": "new-password"}, headers=auth_header(user_token)
    )

    assert resp.json() == {
        "user": {
            "username": "testuser",
            "firstName": "Test",
            "lastName": "User",
            "email": "test@test.com",
        }
    }
    assert repo.authenticate("testuser", "new-password").ok


# -----------------------------------------------------------------------------
# DELETE /users/{username}
# -----------------------------------------------------------------------------

def test_delete_user_works_for_same_user(client, user_token):
    resp = client.delete("/users/testuser", headers=auth_header(user_token))

    assert resp.status_code == 200
    assert resp.json() == {"deleted": "testuser"}


def test_delete_user_unauth_if_not_same_user(client, user2_token):
    resp = client.delete("/users/testuser", headers=auth_header(user2_token))

    assert resp.status_code == 401


def test_delete_user_unauth_for_anon(client):
    resp = client.delete("/users/testuser")

    assert resp.status_code == 401


def test_delete_user_storage_failure(client, db, user_token):
    drop_tables(db)

    resp = client.delete("/users/testuser", headers=auth_header(user_token))

    assert resp.status_code == 500


# -----------------------------------------------------------------------------
# POST /users/{username}/{property_zpid}
# -----------------------------------------------------------------------------

def test_favorite_works_for_same_user(client, repo, user_token):
    resp = client.post(f"/users/testuser/{TEST_ZPIDS[1]}", headers=auth_header(user_token))

    assert resp.status_code == 200
    assert resp.json() == {"favorited": TEST_ZPIDS[1]}
    assert set(repo.get("testuser").value["favoritedProperties"]) == set(TEST_ZPIDS)


def test_favorite_unauth_for_others(client, user2_token):
    resp = client.post(f"/users/testuser/{TEST_ZPIDS[1]}", headers=auth_header(user2_token))

    assert resp.status_code == 401


def test_favorite_unauth_for_anon(client):
    resp = client.post(f"/users/testuser/{TEST_ZPIDS[1]}")

    assert resp.status_code == 401


def test_favorite_bad_request_for_non_numeric_zpid(client, user_token):
    resp = client.post("/users/testuser/not-a-number", headers=auth_header(user_token))

    assert resp.status_code == 400


@pytest.mark.parametrize("zpid", ["18446744073709551616", "-1"])
def test_favorite_bad_request_for_out_of_range_zpid(client, repo, user_token, zpid):
    resp = client.post(f"/users/testuser/{zpid}", headers=auth_header(user_token))

    assert resp.status_code == 400
    assert repo.get("testuser").value["favoritedProperties"] == [TEST_ZPIDS[0]]


def test_unfavorite_bad_request_for_out_of_range_zpid(client, user_token):
    resp = client.delete("/users/testuser/18446744073709551616", headers=auth_header(user_token))

    assert resp.status_code == 400
    assert resp.json()["error"]["status"] == 400


def test_favorite_storage_failure(client, db, user_token):
    drop_tables(db)

    resp = client.post(f"/users/testuser/{TEST_ZPIDS[1]}", headers=auth_header(user_token))

    assert resp.status_code == 500


# -----------------------------------------------------------------------------
# DELETE /users/{username}/{property_zpid}
# -----------------------------------------------------------------------------

def test_unfavorite_works_for_same_user(client, repo, user_token):
    resp = client.delete(f"/users/testuser/{TEST_ZPIDS[0]}", headers=auth_header(user_token))

    assert resp.status_code == 200
    assert resp.json() == {"unFavorited": TEST_ZPIDS[0]}
    assert repo.get("testuser").value["favoritedProperties"] == []


def test_unfavorite_unauth_for_others(client, user2_token):
    resp = client.delete(f"/users/testuser/{TEST_ZPIDS[0]}", headers=auth_header(user2_token))

    assert resp.status_code == 401


def test_unfavorite_unauth_for_anon(client):
    resp = client.delete(f"/users/testuser/{TEST_ZPIDS[0]}")

    assert resp.status_code == 401


def test_unfavorite_storage_failure(client, db, user_token):
    drop_tables(db)

    resp = client.delete(f"/users/testuser/{TEST_ZPIDS[0]}", headers=auth_header(user_token))

    assert resp.status_code == 500


# -----------------------------------------------------------------------------
# Misc
# -----------------------------------------------------------------------------

def test_root_health(client):
    assert client.get("/").json()["status"] == "ok"


def test_unknown_route_returns_error_envelope(client):
    resp = client.get("/nowhere/at/all")

    assert resp.status_code == 404
    assert resp.json()["error"]["status"] == 404
