from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Sequence

from sqlalchemy import inspect as sa_inspect


def serialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: serialize_value(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    return value


def row_to_dict(row: Any, *, exclude: Iterable[str] = ()) -> dict[str, Any]:
    skip = set(exclude)
    mapper = sa_inspect(type(row))
    return {
        column.key: serialize_value(getattr(row, column.key))
        for column in mapper.columns
        if column.key not in skip
    }


def _join_url(base_url: str, segment: str, filename: str) -> str:
    base = str(base_url or "")
    if base and not base.endswith("/"):
        base += "/"
    return f"{base}{segment.strip('/')}/{filename}"


@dataclass(frozen=True)
class ImageUrl:
    """Rewrite a stored bare filename into ``<base_url><segment>/<filename>``."""

    field: str
    segment: str

    def __call__(self, record: dict[str, Any], base_url: str) -> dict[str, Any]:
        if self.field not in record:
            return record
        filename = str(record.get(self.field) or "").strip()
        out = dict(record)
        out[self.field] = _join_url(base_url, self.segment, filename) if filename else None
        return out


def apply_transforms(record: dict[str, Any], transforms: Sequence[ImageUrl], base_url: str) -> dict[str, Any]:
    out = record
    for transform in transforms:
        out = transform(out, base_url)
    return out
