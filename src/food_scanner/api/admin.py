"""Admin endpoints for managing stored users."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from food_scanner.api.auth import require_admin
from food_scanner.api.models import UserUpdateRequest
from food_scanner.services.accounts import normalize_email

if TYPE_CHECKING:
    from food_scanner.containers import AppContainer

router = APIRouter(
    prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)]
)


@router.get("/health")
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/users")
async def list_users(request: Request) -> dict[str, object]:
    """Return registered users."""
    container: AppContainer = request.app.state.container
    return {"users": [{"email": e} for e in container.account_service.list_users()]}


@router.put("/users/{email}")
async def update_user(
    email: str, payload: UserUpdateRequest, request: Request
) -> dict[str, object]:
    """Edit a user's email and optionally reset the password."""
    container: AppContainer = request.app.state.container
    updated = container.account_service.update_user(
        email, payload.email, payload.password
    )
    container.insights_service.transfer(normalize_email(email), updated.email)
    return {"email": updated.email}


@router.delete("/users/{email}")
async def delete_user(email: str, request: Request) -> dict[str, str]:
    """Delete a user and their scan history."""
    container: AppContainer = request.app.state.container
    container.account_service.delete_user(email)
    container.insights_service.forget(normalize_email(email))
    return {"status": "ok"}
