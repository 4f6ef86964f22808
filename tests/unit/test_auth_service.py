"""Unit tests for registration, login and token resolution"""

import pytest
from advance_gateway.domain.exceptions import AuthError, ConflictError
from advance_gateway.infrastructure.database.models import User
from advance_gateway.services.auth import AuthService


@pytest.fixture
def auth(db, settings):
    return AuthService(db, settings)


def test_register_returns_token_for_new_user(auth):
    user, token = auth.register("Carol@Example.com", "password1", "Carol", "Jones")

    assert user.email == "carol@example.com"
    assert user.password_hash != "password1"
    assert user.is_admin is False
    assert user.is_verified is False
    assert auth.resolve_token(token).id == user.id


def test_register_duplicate_email_conflicts(auth, db):
    auth.register("dave@example.com", "password1", "Dave", "Smith")

    with pytest.raises(ConflictError, match="Email already in use"):
        auth.register("DAVE@example.com", "password2", "Other", "Dave")

    assert db.query(User).count() == 1


def test_login_with_correct_password(auth):
    registered, _ = auth.register("erin@example.com", "password1", "Erin", "Lee")

    user, token = auth.login("erin@example.com", "password1")

    assert user.id == registered.id
    assert auth.resolve_token(token).id == registered.id


def test_login_wrong_password(auth):
    auth.register("frank@example.com", "password1", "Frank", "Moore")

    with pytest.raises(AuthError, match="Invalid email or password"):
        auth.login("frank@example.com", "password2")


def test_login_unknown_email_has_same_message(auth):
    with pytest.raises(AuthError, match="Invalid email or password"):
        auth.login("nobody@example.com", "password1")


def test_resolve_garbage_token(auth):
    with pytest.raises(AuthError, match="Invalid or expired token"):
        auth.resolve_token("garbage")
    with pytest.raises(AuthError, match="Invalid or expired token"):
        auth.resolve_token(None)


def test_token_for_deleted_user_is_invalid(auth, db):
    user, token = auth.register("gina@example.com", "password1", "Gina", "Park")
    db.delete(user)
    db.commit()

    with pytest.raises(AuthError, match="Invalid or expired token"):
        auth.resolve_token(token)


def test_token_signed_with_other_secret_is_invalid(db, settings):
    issuer = AuthService(db, settings.model_copy(update={"jwt_secret": "someone-else"}))
    user, token = issuer.register("hank@example.com", "password1", "Hank", "Ng")

    with pytest.raises(AuthError):
        AuthService(db, settings).resolve_token(token)
