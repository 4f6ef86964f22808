"""Dependency injection for FastAPI endpoints"""

from typing import Iterator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from advance_gateway.config import Settings
from advance_gateway.domain.exceptions import AuthError
from advance_gateway.infrastructure.clients.ledger import LedgerClient
from advance_gateway.infrastructure.database.models import User
from advance_gateway.infrastructure.database.session import Database, session_scope
from advance_gateway.services.applications import ApplicationService, ReviewService
from advance_gateway.services.auth import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(database: Database = Depends(get_database)) -> Iterator[Session]:
    """One session per request"""
    yield from session_scope(database)


def get_auth_service(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> AuthService:
    return AuthService(db, settings)


def get_application_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ApplicationService:
    return ApplicationService(db, settings)


def get_review_service(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> ReviewService:
    return ReviewService(db, settings)


def get_ledger_client(settings: Settings = Depends(get_settings)) -> Optional[LedgerClient]:
    """Ledger webhook client, or None when no webhook is configured"""
    if not settings.ledger_webhook_url:
        return None
    return LedgerClient(
        webhook_url=settings.ledger_webhook_url,
        max_retries=settings.webhook_max_retries,
        backoff_base=settings.webhook_backoff_base,
        timeout=settings.http_timeout_seconds,
    )


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the bearer token to a user and record the identity on the request.

    Every verification failure produces the same message.
    """
    if credentials is None:
        raise AuthError("Please log in to access this resource")
    user = auth.resolve_token(credentials.credentials)
    request.state.user_id = str(user.id)
    return user
