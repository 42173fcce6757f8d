from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from jobportal.schemas.entity import EntityConfig, FilterSpec
from jobportal.schemas.envelope import ListRequest, ListResult
from jobportal.services.transforms import apply_transforms, row_to_dict

_LOG = logging.getLogger("jobportal.list_query")


def _trimmed_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = _trimmed_or_none(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _filter_value(spec: FilterSpec, raw: Any) -> Any:
    if spec.kind == "int":
        return _int_or_none(raw)
    return _trimmed_or_none(raw)


def build_filter_predicates(config: EntityConfig, raw_filters: Mapping[str, Any]) -> list[ColumnElement]:
    """Compile the active filters of ``raw_filters`` into bound predicates.

    Blank strings and unparseable integers are skipped, keys the entity does
    not declare never reach SQL. The result keeps the entity's filter order.
    """
    predicates: list[ColumnElement] = []
    for spec in config.filters:
        if spec.name not in raw_filters:
            continue
        value = _filter_value(spec, raw_filters[spec.name])
        if value is None:
            continue
        column = config.column(spec.column_name)
        if spec.op == "like":
            predicates.append(column.like(f"%{value}%"))
        else:
            predicates.append(column == value)
    return predicates


def paginate(
    db: Session,
    config: EntityConfig,
    predicates: Sequence[ColumnElement],
    *,
    page: int,
    limit: int,
) -> tuple[list[Any], int]:
    offset = (page - 1) * limit

    page_stmt = select(config.model)
    count_stmt = select(func.count()).select_from(config.model)
    if predicates:
        page_stmt = page_stmt.where(*predicates)
        count_stmt = count_stmt.where(*predicates)
    page_stmt = page_stmt.order_by(desc(config.sort_column)).limit(limit).offset(offset)

    rows = list(db.execute(page_stmt).scalars().all())
    total = int(db.execute(count_stmt).scalar_one() or 0)
    return rows, total


def record_payload(config: EntityConfig, row: Any, base_url: str) -> dict[str, Any]:
    exclude = (config.password_field,) if config.password_field else ()
    return apply_transforms(row_to_dict(row, exclude=exclude), config.transforms, base_url)


def list_records(db: Session, config: EntityConfig, request: ListRequest, *, base_url: str) -> ListResult:
    predicates = build_filter_predicates(config, request.filters)
    rows, total = paginate(db, config, predicates, page=request.page, limit=request.limit)
    _LOG.debug(
        "list %s page=%s limit=%s filters=%s total=%s",
        config.table_name,
        request.page,
        request.limit,
        len(predicates),
        total,
    )
    records = [record_payload(config, row, base_url) for row in rows]
    return ListResult(page=request.page, limit=request.limit, total=total, records=records)
