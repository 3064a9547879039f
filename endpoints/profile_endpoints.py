from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse, JSONResponse
from pydantic import ValidationError

from persistence import DEFAULT_PROFILE, AsyncProfileRepository, ProfileUpdate, StoreError
from settings import get_settings

router = APIRouter(tags=["profile"])
logger = logging.getLogger(__name__)

SETTINGS = get_settings()
DEBUG_LOG_REQUESTS = SETTINGS.debug_log_requests

INDEX_HTML = Path(__file__).with_name("static") / "index.html"

DB_ERROR_BODY = {"error": "Database operation failed"}

# X-Profile-Source values: tells "no profile yet" apart from "store down"
# without changing the response body.
SOURCE_HEADER = "X-Profile-Source"
SOURCE_STORED = "stored"
SOURCE_DEFAULT = "default"
SOURCE_FALLBACK = "fallback"


def get_profile_repository(request: Request) -> AsyncProfileRepository:
    return request.app.state.profile_repository


async def _read_body(request: Request) -> Any:
    # Parse either JSON or x-www-form-urlencoded / multipart
    content_type = (request.headers.get("content-type") or "").lower()
    if "application/json" in content_type:
        try:
            return await request.json()
        except ValueError:
            # Rejected before the store is touched.
            raise HTTPException(status_code=400, detail="Malformed JSON body")
    form = await request.form()
    return dict(form)


@router.get("/")
async def index() -> FileResponse:
    return FileResponse(INDEX_HTML, media_type="text/html")


@router.post("/update-profile")
async def update_profile(
    request: Request,
    repo: AsyncProfileRepository = Depends(get_profile_repository),
) -> JSONResponse:
    body = await _read_body(request)
    if DEBUG_LOG_REQUESTS:
        keys = sorted(body.keys()) if isinstance(body, dict) else type(body).__name__
        logger.info(
            "UPDATE PROFILE: content_type=%s keys=%s",
            request.headers.get("content-type"),
            keys,
        )

    try:
        update = ProfileUpdate.from_body(body)
    except ValidationError as e:
        logger.error("Update error: %s", e)
        return JSONResponse(DB_ERROR_BODY, status_code=500)

    try:
        submitted = await repo.upsert_profile(update)
    except StoreError as e:
        logger.error("Update error: %s", e)
        return JSONResponse(DB_ERROR_BODY, status_code=500)

    logger.info("Profile updated successfully")
    return JSONResponse(submitted)


@router.get("/get-profile")
async def get_profile(
    repo: AsyncProfileRepository = Depends(get_profile_repository),
) -> JSONResponse:
    try:
        record = await repo.get_profile()
    except StoreError as e:
        logger.error("Query error: %s", e)
        return JSONResponse(dict(DEFAULT_PROFILE), headers={SOURCE_HEADER: SOURCE_FALLBACK})

    logger.info("Profile from store: %s", record)
    if record is None:
        return JSONResponse(dict(DEFAULT_PROFILE), headers={SOURCE_HEADER: SOURCE_DEFAULT})
    return JSONResponse(record.to_response_doc(), headers={SOURCE_HEADER: SOURCE_STORED})
