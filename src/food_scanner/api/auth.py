"""Authentication endpoints and session guards."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, status

from food_scanner.api.models import LoginRequest, SignupRequest
from food_scanner.api.serializers import serialize_session
from food_scanner.domain.accounts import UserSession

if TYPE_CHECKING:
    from food_scanner.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])


def _get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def current_session(request: Request) -> UserSession:
    """Return the signed-in session or reject the request."""
    session = _get_container(request).session_context.current
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return session


async def require_user(
    session: UserSession = Depends(current_session),
) -> UserSession:
    """Allow only signed-in regular users."""
    if session.role != "user":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return session


async def require_admin(
    session: UserSession = Depends(current_session),
) -> UserSession:
    """Allow only the signed-in admin."""
    if session.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return session


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, request: Request) -> dict[str, object]:
    """Register a user; field errors come back as 422."""
    credential = _get_container(request).account_service.signup(
        payload.email, payload.password, payload.confirm_password
    )
    return {"email": credential.email}


@router.post("/login")
async def login(payload: LoginRequest, request: Request) -> dict[str, object]:
    """Sign in as a user or the admin."""
    session = _get_container(request).account_service.login(
        payload.email, payload.password
    )
    return serialize_session(session)


@router.post("/logout")
async def logout(request: Request) -> dict[str, str]:
    """Sign out and clear the persisted session."""
    _get_container(request).account_service.logout()
    return {"status": "ok"}


@router.get("/me")
async def me(
    session: UserSession = Depends(current_session),
) -> dict[str, object]:
    """Return the current session."""
    return serialize_session(session)
