"""Unit tests for password hashing and bearer tokens"""

import uuid
from datetime import timedelta

from jose import jwt
from advance_gateway.infrastructure.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from advance_gateway.utils.date_utils import utcnow

SECRET = "unit-test-secret"


def test_hash_is_salted_and_verifiable():
    first = hash_password("s3cret-pass", rounds=4)
    second = hash_password("s3cret-pass", rounds=4)

    assert first != second  # different salts
    assert "s3cret-pass" not in first
    assert verify_password("s3cret-pass", first)
    assert verify_password("s3cret-pass", second)
    assert not verify_password("wrong-pass", first)


def test_long_passwords_use_every_byte():
    """bcrypt alone truncates at 72 bytes"""
    base = "x" * 80
    hashed = hash_password(base + "a", rounds=4)
    assert verify_password(base + "a", hashed)
    assert not verify_password(base + "b", hashed)


def test_verify_against_garbage_hash():
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_token_round_trip():
    user_id = uuid.uuid4()
    token = create_access_token(user_id, SECRET)
    assert decode_access_token(token, SECRET) == user_id


def test_token_carries_only_id_and_expiry():
    user_id = uuid.uuid4()
    now = utcnow()
    token = create_access_token(user_id, SECRET, expire_hours=24, now=now)
    claims = jwt.get_unverified_claims(token)

    assert set(claims) == {"id", "exp"}
    assert claims["id"] == str(user_id)
    assert claims["exp"] == int((now + timedelta(hours=24)).timestamp())


def test_expired_token_rejected():
    token = create_access_token(uuid.uuid4(), SECRET, expire_hours=24, now=utcnow() - timedelta(hours=25))
    assert decode_access_token(token, SECRET) is None


def test_wrong_secret_rejected():
    token = create_access_token(uuid.uuid4(), SECRET)
    assert decode_access_token(token, "other-secret") is None


def test_malformed_tokens_rejected():
    assert decode_access_token("not.a.token", SECRET) is None
    assert decode_access_token("", SECRET) is None
    no_id = jwt.encode({"sub": "someone", "exp": utcnow() + timedelta(hours=1)}, SECRET, algorithm="HS256")
    assert decode_access_token(no_id, SECRET) is None
    bad_id = jwt.encode({"id": "not-a-uuid", "exp": utcnow() + timedelta(hours=1)}, SECRET, algorithm="HS256")
    assert decode_access_token(bad_id, SECRET) is None
