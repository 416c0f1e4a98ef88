import datetime as dt

import jwt
import pytest

from app.security import (
    InvalidSessionToken,
    create_session_token,
    decode_session_token,
    hash_password,
    token_max_age,
    verify_password,
)


def test_hash_is_not_plaintext():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert hashed.startswith("$2")


def test_verify_password():
    hashed = hash_password("s3cret-pass")
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_verify_password_malformed_hash():
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_token_roundtrip():
    token = create_session_token(42, "alice")
    claims = decode_session_token(token)
    assert claims["sub"] == 42
    assert claims["username"] == "alice"
    assert claims["exp"] - claims["iat"] == 3600


def test_token_expired():
    issued = dt.datetime.now(dt.timezone.utc) - dt.timedelta(hours=2)
    token = create_session_token(1, "alice", now=issued)
    with pytest.raises(InvalidSessionToken):
        decode_session_token(token)


def test_token_wrong_signature():
    now = dt.datetime.now(dt.timezone.utc)
    forged = jwt.encode(
        {"sub": "1", "username": "alice", "iat": now, "exp": now + dt.timedelta(hours=1)},
        "not-the-server-secret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidSessionToken):
        decode_session_token(forged)


def test_token_tampered_payload():
    token = create_session_token(1, "alice")
    header, payload, signature = token.split(".")
    other = create_session_token(2, "bob").split(".")[1]
    with pytest.raises(InvalidSessionToken):
        decode_session_token(".".join([header, other, signature]))


def test_token_garbage():
    with pytest.raises(InvalidSessionToken):
        decode_session_token("definitely.not.ajwt")


def test_token_missing_subject():
    now = dt.datetime.now(dt.timezone.utc)
    token = jwt.encode(
        {"username": "alice", "iat": now, "exp": now + dt.timedelta(hours=1)},
        "test-secret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidSessionToken):
        decode_session_token(token)


def test_token_non_numeric_subject():
    now = dt.datetime.now(dt.timezone.utc)
    token = jwt.encode(
        {"sub": "alice", "iat": now, "exp": now + dt.timedelta(hours=1)},
        "test-secret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidSessionToken):
        decode_session_token(token)


def test_cookie_lifetime_matches_token():
    assert token_max_age() == 3600


def test_token_missing_username():
    now = dt.datetime.now(dt.timezone.utc)
    token = jwt.encode(
        {"sub": "1", "iat": now, "exp": now + dt.timedelta(hours=1)},
        "test-secret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidSessionToken):
        decode_session_token(token)
