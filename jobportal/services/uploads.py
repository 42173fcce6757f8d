from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from fastapi import UploadFile

from jobportal.core.config import settings
from jobportal.core.errors import ValidationError

_LOG = logging.getLogger("jobportal.uploads")
_CHUNK_BYTES = 64 * 1024


def _max_file_bytes() -> int:
    return int(settings.MAX_FILE_MB) * 1024 * 1024


def _target_dir(segment: str) -> Path:
    return Path(settings.UPLOAD_DIR) / segment.strip("/")


def _extension_or_400(filename: str | None) -> str:
    ext = os.path.splitext(str(filename or ""))[1].lower()
    if not ext or ext not in settings.allowed_upload_extensions:
        raise ValidationError(f"Unsupported file type: {ext or 'unknown'}")
    return ext


def save_upload(upload: UploadFile, segment: str) -> str:
    """Store ``upload`` under ``UPLOAD_DIR/<segment>`` and return the bare filename."""
    ext = _extension_or_400(upload.filename)
    target_dir = _target_dir(segment)
    target_dir.mkdir(parents=True, exist_ok=True)
    filename = f"{uuid.uuid4().hex}{ext}"
    target = target_dir / filename

    written = 0
    limit = _max_file_bytes()
    try:
        with target.open("wb") as out:
            while True:
                chunk = upload.file.read(_CHUNK_BYTES)
                if not chunk:
                    break
                written += len(chunk)
                if written > limit:
                    raise ValidationError(f"File exceeds the {settings.MAX_FILE_MB} MB limit")
                out.write(chunk)
    except ValidationError:
        target.unlink(missing_ok=True)
        raise
    if written == 0:
        target.unlink(missing_ok=True)
        raise ValidationError("Uploaded file is empty")

    _LOG.info("stored upload %s/%s bytes=%s", segment, filename, written)
    return filename


def remove_upload(segment: str, filename: str | None) -> None:
    if not filename:
        return
    path = _target_dir(segment) / Path(filename).name
    try:
        path.unlink(missing_ok=True)
    except OSError:
        _LOG.warning("could not remove upload %s", path)
