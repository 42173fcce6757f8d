from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from sqlalchemy import inspect as sa_inspect

from jobportal.services.transforms import ImageUrl

FilterOp = Literal["like", "="]
FilterKind = Literal["str", "int"]


@dataclass(frozen=True)
class FilterSpec:
    name: str
    op: FilterOp = "like"
    kind: FilterKind = "str"
    column: str | None = None

    @property
    def column_name(self) -> str:
        return self.column or self.name


@dataclass(frozen=True)
class EntityConfig:
    """Static description of one REST resource backed by one table.

    ``filters`` are applied in declaration order. ``keep_if_absent`` fields
    keep their stored value on update when the request leaves them out or
    sends them empty. ``echo_fields`` are returned after create/update.
    """

    name: str
    label: str
    plural_label: str
    model: type
    filters: tuple[FilterSpec, ...] = ()
    sort_key: str | None = None
    transforms: tuple[ImageUrl, ...] = ()
    create_required: tuple[str, ...] = ()
    update_required: tuple[str, ...] = ()
    create_defaults: dict[str, Any] = field(default_factory=dict)
    keep_if_absent: tuple[str, ...] = ()
    echo_fields: tuple[str, ...] = ()
    file_field: str | None = None
    password_field: str | None = None

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    @property
    def pk_name(self) -> str:
        return sa_inspect(self.model).primary_key[0].key

    @property
    def pk_column(self):
        return getattr(self.model, self.pk_name)

    @property
    def sort_column(self):
        return getattr(self.model, self.sort_key or self.pk_name)

    def column(self, name: str):
        return getattr(self.model, name)

    def column_names(self) -> list[str]:
        return [column.key for column in sa_inspect(self.model).columns]

    def upload_segment(self) -> str | None:
        if not self.file_field:
            return None
        for transform in self.transforms:
            if transform.field == self.file_field:
                return transform.segment
        return self.name
