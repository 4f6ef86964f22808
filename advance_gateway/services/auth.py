"""Registration, login and bearer-token resolution"""

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from advance_gateway.config import Settings
from advance_gateway.domain.exceptions import AuthError, ConflictError
from advance_gateway.infrastructure.database.models import User
from advance_gateway.infrastructure.database.repositories import UserRepository
from advance_gateway.infrastructure.observability.metrics import record_auth
from advance_gateway.infrastructure.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_TOKEN = "Invalid or expired token"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Issues tokens for registered users and resolves tokens back to users"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.users = UserRepository(db)

    def issue_token(self, user: User) -> str:
        return create_access_token(
            user.id,
            self.settings.jwt_secret,
            algorithm=self.settings.jwt_algorithm,
            expire_hours=self.settings.access_token_expire_hours,
        )

    def register(self, email: str, password: str, first_name: str, last_name: str) -> Tuple[User, str]:
        """
        Create a user and sign them in.

        Raises:
            ConflictError: If the email is already registered
        """
        email = normalize_email(email)
        if self.users.get_by_email(email) is not None:
            record_auth("register", ok=False)
            raise ConflictError("Email already in use")

        try:
            user = self.users.create_user(
                email=email,
                password_hash=hash_password(password, rounds=self.settings.bcrypt_rounds),
                first_name=first_name.strip(),
                last_name=last_name.strip(),
            )
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            record_auth("register", ok=False)
            raise ConflictError("Email already in use")

        self.db.refresh(user)
        record_auth("register", ok=True)
        logger.info("User registered", extra={"user_id": str(user.id)})
        return user, self.issue_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Verify credentials and return a fresh token.

        Raises:
            AuthError: Unknown email or wrong password (same message for both)
        """
        user = self.users.get_by_email(normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            record_auth("login", ok=False)
            logger.warning("Login failed")
            raise AuthError(INVALID_CREDENTIALS)

        record_auth("login", ok=True)
        return user, self.issue_token(user)

    def resolve_token(self, token: Optional[str]) -> User:
        """
        Map a bearer token to an existing user.

        Raises:
            AuthError: For any verification failure, including a deleted user
        """
        user_id = decode_access_token(token or "", self.settings.jwt_secret, self.settings.jwt_algorithm)
        user = self.users.get_by_id(user_id) if user_id is not None else None
        if user is None:
            record_auth("token", ok=False)
            raise AuthError(INVALID_TOKEN)
        return user
