"""API routes for registration and cookie sessions."""
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response, status

from nightguard import config
from nightguard.api.deps import get_current_user
from nightguard.api.schemas import LoginRequest, RegisterRequest, UserResponse
from nightguard.models.domain import User
from nightguard.services.auth import AuthService
from nightguard.storage.base import Storage
from nightguard.storage.factory import get_storage

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        max_age=config.SESSION_TTL_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=config.SECURE_COOKIES
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(registration: RegisterRequest, response: Response, storage: Storage = Depends(get_storage)):
    """Create a staff or security account and sign it in."""
    auth = AuthService(storage)
    user = auth.register(
        username=registration.username,
        password=registration.password,
        name=registration.name,
        email=registration.email,
        role=registration.role
    )
    _set_session_cookie(response, auth.start_session(user))
    return user


@router.post("/login", response_model=UserResponse)
def login(credentials: LoginRequest, response: Response, storage: Storage = Depends(get_storage)):
    user, token = AuthService(storage).login(credentials.username, credentials.password)
    _set_session_cookie(response, token)
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    session_token: Optional[str] = Cookie(None, alias=config.SESSION_COOKIE_NAME),
    storage: Storage = Depends(get_storage)
):
    AuthService(storage).logout(session_token)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(config.SESSION_COOKIE_NAME)
    return response


@router.get("/user", response_model=UserResponse)
def current_user(user: User = Depends(get_current_user)):
    return user
