"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from food_scanner.api.admin import router as admin_router
from food_scanner.api.auth import require_user
from food_scanner.api.auth import router as auth_router
from food_scanner.api.models import CompareRequest, ScanRequest
from food_scanner.api.serializers import (
    serialize_comparison,
    serialize_insights,
    serialize_report,
)
from food_scanner.app_logging import configure_logging
from food_scanner.containers import AppContainer
from food_scanner.domain.accounts import UserSession
from food_scanner.errors import (
    CredentialValidationError,
    InvalidBarcodeError,
    InvalidCredentialsError,
    UnknownUserError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.session_context.hydrate()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(admin_router)

    @app.exception_handler(CredentialValidationError)
    async def credential_validation_handler(
        request: Request, exc: CredentialValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"errors": exc.errors},
        )

    @app.exception_handler(InvalidBarcodeError)
    async def invalid_barcode_handler(
        request: Request, exc: InvalidBarcodeError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"errors": {"barcode": exc.message}},
        )

    @app.exception_handler(InvalidCredentialsError)
    async def invalid_credentials_handler(
        request: Request, exc: InvalidCredentialsError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc)}
        )

    @app.exception_handler(UnknownUserError)
    async def unknown_user_handler(
        request: Request, exc: UnknownUserError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/scan")
    async def scan(
        payload: ScanRequest,
        request: Request,
        session: UserSession = Depends(require_user),
    ) -> dict[str, object]:
        """Look up a barcode typed by the user."""
        state_container: AppContainer = request.app.state.container
        report = await state_container.scanner_service.scan(
            payload.barcode, user_email=session.email
        )
        return serialize_report(report)

    @app.post("/scan/demo")
    async def scan_demo(
        request: Request, session: UserSession = Depends(require_user)
    ) -> dict[str, object]:
        """Scan the demo product."""
        state_container: AppContainer = request.app.state.container
        report = await state_container.scanner_service.scan_demo(
            user_email=session.email
        )
        return serialize_report(report)

    @app.post("/scan/image")
    async def scan_image(
        request: Request, session: UserSession = Depends(require_user)
    ) -> dict[str, object]:
        """Decode a barcode from the raw image body and scan it."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await _read_limited_body(
            request, state_container.settings.max_image_bytes
        )
        report = await state_container.scanner_service.scan_image(
            image_bytes, user_email=session.email
        )
        if report.status == "decode_failed":
            logger.info("Image upload from %s did not decode", session.email)
        return serialize_report(report)

    @app.get("/scan/latest", dependencies=[Depends(require_user)])
    async def latest_scan(request: Request) -> dict[str, object]:
        """Return the newest completed scan."""
        state_container: AppContainer = request.app.state.container
        latest = state_container.scanner_service.latest
        return {"report": serialize_report(latest) if latest else None}

    @app.post("/compare", dependencies=[Depends(require_user)])
    async def compare(payload: CompareRequest, request: Request) -> dict[str, object]:
        """Compare two products by barcode."""
        state_container: AppContainer = request.app.state.container
        comparison = await state_container.comparison_service.compare(
            payload.first, payload.second
        )
        return serialize_comparison(comparison)

    @app.get("/insights")
    async def insights(
        request: Request, session: UserSession = Depends(require_user)
    ) -> dict[str, object]:
        """Summarize the user's scan history."""
        state_container: AppContainer = request.app.state.container
        service = state_container.insights_service
        return serialize_insights(
            service.summary(session.email), service.history(session.email)
        )

    return app


async def _read_limited_body(request: Request, limit: int) -> bytes:
    """Read the request body, rejecting uploads larger than ``limit`` bytes."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise HTTPException(status_code=413, detail="Image is too large.")
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise HTTPException(status_code=413, detail="Image is too large.")
    return bytes(body)
