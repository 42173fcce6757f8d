from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, Field

LIST_FIELD = "responseData"


def _positive_int_or(raw: Any, default: int) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


class ListRequest(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)
    filters: Dict[str, Any] = {}

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_query(cls, params: Mapping[str, Any], *, default_limit: int = 10, max_limit: int | None = None) -> "ListRequest":
        page = _positive_int_or(params.get("page"), 1)
        limit = _positive_int_or(params.get("limit"), default_limit)
        if max_limit:
            limit = min(limit, max_limit)
        filters = {k: v for k, v in params.items() if k not in {"page", "limit"}}
        return cls(page=page, limit=limit, filters=filters)


def total_pages(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / limit)


class ListResult(BaseModel):
    page: int
    limit: int
    total: int
    records: List[Dict[str, Any]] = []

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)

    def payload(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            LIST_FIELD: self.records,
        }


def success_response(message: str, data: Any = None) -> dict[str, Any]:
    return {"success": True, "message": message, "data": data}
