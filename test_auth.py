import base64

import pytest


def test_login_returns_token(client):
    res = client.post("/api/login", json={"username": "admin", "password": "s3cret-pass"})
    assert res.status_code == 200, res.text
    token = res.json()["token"]
    assert base64.b64decode(token).decode() == "admin:s3cret-pass"

    res = client.post("/api/validate-session", json={"token": token})
    assert res.status_code == 200
    assert res.json()["message"] == "Session valid"


def test_login_token_works_as_basic_auth(client):
    token = client.post("/api/login", json={"username": "admin", "password": "s3cret-pass"}).json()["token"]
    res = client.post("/cron/stop", headers={"Authorization": f"Basic {token}"})
    assert res.status_code == 200


@pytest.mark.parametrize("payload", [{}, {"username": "admin"}, {"username": "", "password": "x"}])
def test_login_requires_both_fields(client, payload):
    res = client.post("/api/login", json=payload)
    assert res.status_code == 400
    assert res.json()["detail"] == "Username and password are required"


def test_login_wrong_password(client):
    res = client.post("/api/login", json={"username": "admin", "password": "wrong"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid username or password"


@pytest.mark.parametrize("token, detail", [
    (None, "No token provided"),
    ("not base64!!", "Invalid token format"),
    (base64.b64encode(b"no-colon").decode(), "Invalid token format"),
    (base64.b64encode(b"admin:wrong").decode(), "Invalid session"),
])
def test_validate_session_rejects(client, token, detail):
    res = client.post("/api/validate-session", json={"token": token})
    assert res.status_code == 401
    assert res.json()["detail"] == detail


def test_malformed_basic_header(client):
    res = client.post("/cron/stop", headers={"Authorization": "Basic %%%"})
    assert res.status_code == 401
    assert res.headers["www-authenticate"].startswith("Basic")

    res = client.post("/cron/stop", headers={"Authorization": "Basic " + base64.b64encode(b"no-colon").decode()})
    assert res.status_code == 401

    res = client.post("/cron/stop", headers={"Authorization": "Bearer abc"})
    assert res.status_code == 401
    assert res.json()["detail"].startswith("Authentication required")


def test_challenge_header_on_rejection(client):
    res = client.post("/cron/stop")
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Basic"

    res = client.post("/cron/stop", auth=("admin", "wrong"))
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Basic"
    assert res.json()["detail"] == "Authentication failed: invalid username or password"


def test_basic_scheme_is_case_insensitive(client):
    token = base64.b64encode(b"admin:s3cret-pass").decode()
    res = client.post("/cron/stop", headers={"Authorization": f"basic {token}"})
    assert res.status_code == 200
