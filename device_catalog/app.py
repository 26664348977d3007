from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_admin, require_user
from .auth.users import authenticate
from .ingestion.ingest import run_ingestion
from .ingestion.results import (
    IngestionError,
    IngestionInProgressError,
    SourceFetchError,
)
from .models import (
    DeviceNameRequest,
    DeviceNameResponse,
    LoginRequest,
    UpdateDevicesResponse,
)
from .storage.database import DeviceStore, get_store
from .storage.errors import StorageError
from .storage.repository import find_marketing_name

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="Device Catalog API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "device-catalog-secret-change-in-production"),
)


@app.on_event("startup")
def _init_store() -> None:
    # builds the shared store and the devices table before the first request
    app.dependency_overrides.get(get_store, get_store)()


@app.exception_handler(RequestValidationError)
def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": "Invalid JSON body"})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/get-device-name", response_model=DeviceNameResponse)
def get_device_name(
    body: DeviceNameRequest,
    store: DeviceStore = Depends(get_store),
) -> DeviceNameResponse:
    try:
        marketing_name = find_marketing_name(store, body.retail_branding, body.model)
    except StorageError:
        raise HTTPException(status_code=500, detail="Database query error")
    if marketing_name is None:
        raise HTTPException(status_code=404, detail="Device not found")
    return DeviceNameResponse(data=marketing_name)


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Operator endpoints ───────────────────────────────────────────────────


@app.post("/update-devices", response_model=UpdateDevicesResponse)
def update_devices(
    user: dict = Depends(require_admin),
    store: DeviceStore = Depends(get_store),
) -> UpdateDevicesResponse:
    logger.info("Device update triggered by %s", user["username"])
    try:
        summary = run_ingestion(store)
    except IngestionInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except SourceFetchError as exc:
        logger.error("Failed to update devices: %s", exc)
        raise HTTPException(status_code=502, detail=f"Failed to update devices: {exc}")
    except IngestionError as exc:
        logger.error("Failed to update devices: %s", exc)
        raise HTTPException(status_code=500, detail=f"Failed to update devices: {exc}")

    return UpdateDevicesResponse(
        status="ok",
        message="Devices updated successfully",
        summary=summary.to_dict(),
    )
