from datetime import datetime, timedelta

import pytest
from jose import jwt

from threadboard.core import security
from threadboard.core.config import settings
from threadboard.core.exceptions import AlreadyExistsError, InvalidCredentialsError, InvalidTokenError
from threadboard.modules.auth.schemas.auth import UserAuth, RefreshTokenRequest
from threadboard.modules.auth.services import auth as auth_service
from threadboard.modules.auth.services.auth import register_user, login, refresh_tokens
from threadboard.modules.user_management.services.user import get_user_by_username


def test_register_stores_hash_not_password(db):
    user = register_user(db, UserAuth(username="alice", password="pw"))
    assert user.id
    assert user.username == "alice"
    assert user.hashed_password != "pw"
    assert user.refresh_token is None


def test_register_duplicate_username_fails(db):
    register_user(db, UserAuth(username="alice", password="pw"))
    with pytest.raises(AlreadyExistsError):
        register_user(db, UserAuth(username="alice", password="other"))


def test_register_race_on_username_reports_already_exists(db, monkeypatch):
    register_user(db, UserAuth(username="alice", password="pw"))
    # Another request inserted the same username between lookup and commit
    monkeypatch.setattr(auth_service, "get_user_by_username", lambda db, username: None)

    with pytest.raises(AlreadyExistsError):
        register_user(db, UserAuth(username="alice", password="other"))

    assert get_user_by_username(db, username="alice") is not None


def test_usernames_are_case_sensitive(db):
    register_user(db, UserAuth(username="alice", password="pw"))
    assert register_user(db, UserAuth(username="Alice", password="pw")).username == "Alice"


def test_login_unknown_user_fails(db):
    with pytest.raises(InvalidCredentialsError):
        login(db, UserAuth(username="ghost", password="pw"))


def test_login_wrong_password_fails(db):
    register_user(db, UserAuth(username="alice", password="pw"))
    with pytest.raises(InvalidCredentialsError):
        login(db, UserAuth(username="alice", password="wrong"))


def test_login_persists_refresh_token(db):
    user = register_user(db, UserAuth(username="alice", password="pw"))
    tokens = login(db, UserAuth(username="alice", password="pw"))

    db.refresh(user)
    assert user.refresh_token == tokens.refresh_token
    assert user.refresh_token_expiry_time > datetime.utcnow() + timedelta(days=6)

    claims = jwt.decode(tokens.access_token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["username"] == "alice"
    assert claims["sub"] == user.id


def test_second_login_revokes_first_refresh_token(db):
    register_user(db, UserAuth(username="alice", password="pw"))
    first = login(db, UserAuth(username="alice", password="pw"))
    login(db, UserAuth(username="alice", password="pw"))

    with pytest.raises(InvalidTokenError):
        refresh_tokens(db, RefreshTokenRequest(access_token=first.access_token, refresh_token=first.refresh_token))


def test_refresh_rotates_both_tokens(db):
    user = register_user(db, UserAuth(username="alice", password="pw"))
    tokens = login(db, UserAuth(username="alice", password="pw"))

    rotated = refresh_tokens(db, RefreshTokenRequest(access_token=tokens.access_token, refresh_token=tokens.refresh_token))

    assert rotated.refresh_token != tokens.refresh_token
    db.refresh(user)
    assert user.refresh_token == rotated.refresh_token


def test_refresh_accepts_expired_access_token(db):
    user = register_user(db, UserAuth(username="alice", password="pw"))
    tokens = login(db, UserAuth(username="alice", password="pw"))
    expired = security.create_access_token(user.id, user.username, expires_delta=timedelta(minutes=-30))

    rotated = refresh_tokens(db, RefreshTokenRequest(access_token=expired, refresh_token=tokens.refresh_token))
    assert security.verify_access_token(rotated.access_token) == user.id


def test_refresh_rejects_mismatched_refresh_token(db):
    register_user(db, UserAuth(username="alice", password="pw"))
    tokens = login(db, UserAuth(username="alice", password="pw"))

    with pytest.raises(InvalidTokenError):
        refresh_tokens(db, RefreshTokenRequest(access_token=tokens.access_token, refresh_token="not-the-token"))


def test_refresh_rejects_expired_refresh_token(db):
    user = register_user(db, UserAuth(username="alice", password="pw"))
    tokens = login(db, UserAuth(username="alice", password="pw"))
    user.refresh_token_expiry_time = datetime.utcnow() - timedelta(seconds=1)
    db.commit()

    with pytest.raises(InvalidTokenError):
        refresh_tokens(db, RefreshTokenRequest(access_token=tokens.access_token, refresh_token=tokens.refresh_token))


def test_refresh_rejects_token_signed_with_other_algorithm(db):
    user = register_user(db, UserAuth(username="alice", password="pw"))
    tokens = login(db, UserAuth(username="alice", password="pw"))
    forged = jwt.encode({"sub": user.id, "username": "alice"}, settings.SECRET_KEY, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        refresh_tokens(db, RefreshTokenRequest(access_token=forged, refresh_token=tokens.refresh_token))


def test_refresh_rejects_unknown_user(db):
    register_user(db, UserAuth(username="alice", password="pw"))
    tokens = login(db, UserAuth(username="alice", password="pw"))
    orphan = security.create_access_token("missing-id", "nobody")

    with pytest.raises(InvalidTokenError):
        refresh_tokens(db, RefreshTokenRequest(access_token=orphan, refresh_token=tokens.refresh_token))


def test_refresh_rejects_token_without_username(db):
    user = register_user(db, UserAuth(username="alice", password="pw"))
    tokens = login(db, UserAuth(username="alice", password="pw"))
    anonymous = jwt.encode({"sub": user.id}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    with pytest.raises(InvalidTokenError):
        refresh_tokens(db, RefreshTokenRequest(access_token=anonymous, refresh_token=tokens.refresh_token))
