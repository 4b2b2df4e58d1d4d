import base64
import json

from jose import jwt

from threadboard.core.config import settings


def test_register_returns_public_fields_only(client):
    response = client.post("/auth/register", json={"username": "alice", "password": "pw"})
    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"id", "username"}
    assert body["username"] == "alice"


def test_register_twice_is_rejected(client):
    client.post("/auth/register", json={"username": "alice", "password": "pw"})
    response = client.post("/auth/register", json={"username": "alice", "password": "pw"})
    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists."


def test_register_requires_username_and_password(client):
    response = client.post("/auth/register", json={"username": "alice"})
    assert response.status_code == 422


def test_login_returns_decodable_token_pair(client):
    client.post("/auth/register", json={"username": "alice", "password": "pw"})
    response = client.post("/auth/login", json={"username": "alice", "password": "pw"})
    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"accessToken", "refreshToken"}
    claims = jwt.decode(body["accessToken"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["username"] == "alice"


def test_login_with_wrong_password_is_rejected(client):
    client.post("/auth/register", json={"username": "alice", "password": "pw"})
    response = client.post("/auth/login", json={"username": "alice", "password": "nope"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Credentials are not valid!"


def test_refresh_token_round(client):
    client.post("/auth/register", json={"username": "alice", "password": "pw"})
    tokens = client.post("/auth/login", json={"username": "alice", "password": "pw"}).json()

    response = client.post("/auth/refresh-token", json=tokens)
    assert response.status_code == 200
    rotated = response.json()
    assert rotated["refreshToken"] != tokens["refreshToken"]

    # The old refresh token is gone after rotation
    reused = client.post("/auth/refresh-token", json=tokens)
    assert reused.status_code == 400
    assert reused.json()["detail"] == "Invalid access token or refresh token"

    response = client.post("/auth/refresh-token", json=rotated)
    assert response.status_code == 200


def test_refresh_with_garbage_access_token_is_rejected(client):
    client.post("/auth/register", json={"username": "alice", "password": "pw"})
    tokens = client.post("/auth/login", json={"username": "alice", "password": "pw"}).json()

    response = client.post(
        "/auth/refresh-token",
        json={"accessToken": "garbage", "refreshToken": tokens["refreshToken"]},
    )
    assert response.status_code == 400


def test_refresh_with_non_string_algorithm_header_is_rejected(client):
    client.post("/auth/register", json={"username": "alice", "password": "pw"})
    tokens = client.post("/auth/login", json={"username": "alice", "password": "pw"}).json()

    header = base64.urlsafe_b64encode(json.dumps({"alg": 512}).encode()).rstrip(b"=").decode()
    claims = base64.urlsafe_b64encode(json.dumps({"username": "alice"}).encode()).rstrip(b"=").decode()
    response = client.post(
        "/auth/refresh-token",
        json={"accessToken": f"{header}.{claims}.c2ln", "refreshToken": tokens["refreshToken"]},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid access token or refresh token"
