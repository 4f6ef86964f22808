"""POST /api/auth/register, POST /api/auth/login, GET /api/auth/me"""

from fastapi import APIRouter, Depends, status

from advance_gateway.api.schemas import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
    UserData,
    UserSchema,
)
from advance_gateway.api.dependencies import get_auth_service, get_current_user
from advance_gateway.infrastructure.database.models import User
from advance_gateway.services.auth import AuthService

router = APIRouter()


def _user_data(user: User) -> UserData:
    return UserData(user=UserSchema.model_validate(user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request_body: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    """
    Register a new user and return a token for them.

    Returns:
        400 if the email is already registered
    """
    user, token = auth.register(
        email=request_body.email,
        password=request_body.password,
        first_name=request_body.first_name,
        last_name=request_body.last_name,
    )
    return AuthResponse(token=token, data=_user_data(user))


@router.post("/login", response_model=AuthResponse)
def login(request_body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Exchange email + password for a bearer token"""
    user, token = auth.login(request_body.email, request_body.password)
    return AuthResponse(token=token, data=_user_data(user))


@router.get("/me", response_model=CurrentUserResponse)
def me(current_user: User = Depends(get_current_user)):
    return CurrentUserResponse(data=_user_data(current_user))
