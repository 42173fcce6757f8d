from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import delete
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from jobportal.core.errors import ConflictError, NoopError, NotFoundError, UnexpectedError, ValidationError
from jobportal.core.security import hash_password, verify_password
from jobportal.models.common import utcnow
from jobportal.schemas.entity import EntityConfig
from jobportal.services.list_query import record_payload
from jobportal.services.transforms import serialize_value
from jobportal.services.uploads import remove_upload

_LOG = logging.getLogger("jobportal.crud")

SYSTEM_FIELDS = {"created_at", "updated_at"}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _human_join(names: list[str]) -> str:
    if len(names) <= 1:
        return "".join(names)
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return ", ".join(names[:-1]) + f", and {names[-1]}"


def parse_id_or_400(config: EntityConfig, raw_id: Any) -> int:
    text = str(raw_id or "").strip()
    if not (text.isascii() and text.isdigit()) or int(text) < 1:
        raise ValidationError(f"Invalid {config.label} ID")
    return int(text)


def _require_fields_or_400(payload: dict[str, Any], required: tuple[str, ...]) -> None:
    missing = [name for name in required if _is_blank(payload.get(name))]
    if not missing:
        return
    verb = "is" if len(required) == 1 else "are"
    raise ValidationError(f"{_human_join(list(required))} {verb} required")


def _coerce_column_value(config: EntityConfig, name: str, value: Any) -> Any:
    if value is None:
        return None
    try:
        python_type = config.column(name).property.columns[0].type.python_type
    except (AttributeError, NotImplementedError):
        return value
    if python_type is int:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            raise ValidationError(f'Field "{name}" must be an integer')
    if python_type is Decimal:
        try:
            return Decimal(str(value).strip().replace(",", "."))
        except InvalidOperation:
            raise ValidationError(f'Field "{name}" must be a number')
    if python_type is str:
        return str(value).strip()
    return value


def _clean_payload(config: EntityConfig, payload: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be an object")
    mutable = set(config.column_names()) - SYSTEM_FIELDS - {config.pk_name}
    data: dict[str, Any] = {}
    for name, value in payload.items():
        if name not in mutable:
            continue
        data[name] = None if _is_blank(value) else _coerce_column_value(config, name, value)
    return data


def _non_nullable_columns(config: EntityConfig) -> dict[str, Any]:
    return {column.key: column for column in sa_inspect(config.model).columns if not column.nullable}


def _reject_null_writes(config: EntityConfig, data: dict[str, Any]) -> None:
    required = _non_nullable_columns(config)
    for name, value in data.items():
        if value is None and name in required:
            raise ValidationError(f'Field "{name}" cannot be empty')


def _require_columns_or_400(config: EntityConfig, data: dict[str, Any]) -> None:
    missing = sorted(
        name
        for name, column in _non_nullable_columns(config).items()
        if name not in SYSTEM_FIELDS
        and not column.primary_key
        and column.default is None
        and column.server_default is None
        and data.get(name) is None
    )
    if missing:
        raise ValidationError("Missing required fields: " + ", ".join(missing))


def _is_not_null_violation(exc: IntegrityError) -> bool:
    text = str(exc.orig).lower()
    return "not null" in text or "not-null" in text or "cannot be null" in text


def _echo(config: EntityConfig, row: Any) -> dict[str, Any]:
    row_id = getattr(row, config.pk_name)
    out: dict[str, Any] = {config.pk_name: row_id}
    if config.pk_name != "id":
        out["id"] = row_id
    for name in config.echo_fields:
        out[name] = serialize_value(getattr(row, name, None))
    return out


def _commit_or_raise(db: Session, config: EntityConfig, action: str) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        _LOG.info("%s %s rejected by constraint: %s", action, config.table_name, exc.orig)
        if _is_not_null_violation(exc):
            raise ValidationError(f"Missing required {config.label.lower()} fields", error=str(exc.orig))
        raise ConflictError(f"{config.label} already exists")
    except StaleDataError:
        # The row was deleted by another request after it was loaded.
        db.rollback()
        raise NotFoundError(f"{config.label} not found")
    except SQLAlchemyError as exc:
        db.rollback()
        _LOG.exception("%s %s failed", action, config.table_name)
        raise UnexpectedError(f"Error {action} {config.label.lower()}", error=str(exc))


def get_record(db: Session, config: EntityConfig, raw_id: Any, *, base_url: str) -> dict[str, Any]:
    row_id = parse_id_or_400(config, raw_id)
    row = db.get(config.model, row_id)
    if row is None:
        raise NotFoundError(f"{config.label} not found")
    return record_payload(config, row, base_url)


def create_record(db: Session, config: EntityConfig, payload: dict[str, Any]) -> dict[str, Any]:
    _require_fields_or_400(payload, config.create_required)
    data = dict(config.create_defaults)
    data.update({k: v for k, v in _clean_payload(config, payload).items() if v is not None})

    password_field = config.password_field
    if password_field and data.get(password_field):
        data[password_field] = hash_password(str(data[password_field]))
    _require_columns_or_400(config, data)

    row = config.model(**data)
    db.add(row)
    _commit_or_raise(db, config, "creating")
    db.refresh(row)
    _LOG.info("created %s %s=%s", config.table_name, config.pk_name, getattr(row, config.pk_name))
    return _echo(config, row)


def _changed_fields(config: EntityConfig, row: Any, data: dict[str, Any]) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    for name, value in data.items():
        current = getattr(row, name)
        if name == config.password_field:
            if current and value and verify_password(str(value), str(current)):
                continue
            changes[name] = hash_password(str(value)) if value else None
            continue
        if current != value:
            changes[name] = value
    return changes


def update_record(db: Session, config: EntityConfig, raw_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
    row_id = parse_id_or_400(config, raw_id)
    _require_fields_or_400(payload, config.update_required)

    row = db.get(config.model, row_id)
    if row is None:
        raise NotFoundError(f"{config.label} not found")

    data = _clean_payload(config, payload)
    keep = set(config.keep_if_absent)
    if config.password_field:
        keep.add(config.password_field)
    data = {k: v for k, v in data.items() if not (k in keep and v is None)}
    _reject_null_writes(config, data)

    changes = _changed_fields(config, row, data)
    if not changes:
        raise NoopError(f"No changes made to the {config.label.lower()}")

    replaced_file = getattr(row, config.file_field) if config.file_field in changes else None
    for name, value in changes.items():
        setattr(row, name, value)
    row.updated_at = utcnow()
    _commit_or_raise(db, config, "updating")
    _LOG.info("updated %s %s=%s fields=%s", config.table_name, config.pk_name, row_id, sorted(changes))
    if replaced_file:
        remove_upload(config.upload_segment(), replaced_file)
    return _echo(config, row)


def delete_record(db: Session, config: EntityConfig, raw_id: Any) -> None:
    row_id = parse_id_or_400(config, raw_id)
    try:
        result = db.execute(delete(config.model).where(config.pk_column == row_id))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        _LOG.exception("deleting %s %s=%s failed", config.table_name, config.pk_name, row_id)
        raise UnexpectedError(f"Error deleting {config.label.lower()}", error=str(exc))
    if not result.rowcount:
        raise NotFoundError(f"{config.label} not found")
    _LOG.info("deleted %s %s=%s", config.table_name, config.pk_name, row_id)
