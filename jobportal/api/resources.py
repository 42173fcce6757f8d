from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from jobportal.core.config import settings
from jobportal.core.errors import ValidationError
from jobportal.db.session import get_db
from jobportal.schemas.entity import EntityConfig
from jobportal.schemas.envelope import ListRequest, success_response
from jobportal.services.entity_crud import create_record, delete_record, get_record, update_record
from jobportal.services.list_query import list_records
from jobportal.services.uploads import remove_upload, save_upload

_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def _read_body(request: Request, config: EntityConfig) -> tuple[dict[str, Any], UploadFile | None]:
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        payload: dict[str, Any] = {}
        upload = None
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == config.file_field and value.filename:
                    upload = value
                continue
            payload[key] = value
        return payload, upload

    raw = await request.body()
    if not raw.strip():
        return {}, None
    try:
        payload = json.loads(raw)
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload, None


async def _with_upload(config: EntityConfig, payload: dict[str, Any], upload: UploadFile | None, action):
    segment = config.upload_segment()
    stored = None
    if upload is not None and config.file_field and segment:
        stored = await run_in_threadpool(save_upload, upload, segment)
        payload[config.file_field] = stored
    try:
        return await run_in_threadpool(action, payload)
    except Exception:
        if stored:
            remove_upload(segment, stored)
        raise


def build_resource_router(config: EntityConfig) -> APIRouter:
    """List/get/create/update/delete routes for one configured entity."""
    router = APIRouter()

    @router.get("")
    @router.get("/", include_in_schema=False)
    def list_rows(request: Request, db: Session = Depends(get_db)):
        list_request = ListRequest.from_query(
            request.query_params,
            default_limit=settings.DEFAULT_PAGE_LIMIT,
            max_limit=settings.MAX_PAGE_LIMIT,
        )
        result = list_records(db, config, list_request, base_url=settings.IMAGE_BASE_URL)
        return success_response(f"{config.plural_label} fetched successfully", result.payload())

    @router.get("/{row_id}")
    def get_row(row_id: str, db: Session = Depends(get_db)):
        record = get_record(db, config, row_id, base_url=settings.IMAGE_BASE_URL)
        return success_response(f"{config.label} fetched successfully", record)

    @router.post("")
    @router.post("/", include_in_schema=False)
    async def create_row(request: Request, db: Session = Depends(get_db)):
        payload, upload = await _read_body(request, config)
        data = await _with_upload(config, payload, upload, lambda body: create_record(db, config, body))
        return success_response(f"{config.label} created successfully", data)

    @router.put("/{row_id}")
    async def update_row(row_id: str, request: Request, db: Session = Depends(get_db)):
        payload, upload = await _read_body(request, config)
        data = await _with_upload(config, payload, upload, lambda body: update_record(db, config, row_id, body))
        return success_response(f"{config.label} updated successfully", data)

    @router.delete("/{row_id}")
    def delete_row(row_id: str, db: Session = Depends(get_db)):
        delete_record(db, config, row_id)
        return success_response(f"{config.label} deleted successfully")

    return router
