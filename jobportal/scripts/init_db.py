from __future__ import annotations

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.engine import Engine

import jobportal.models  # noqa: F401  registers every table on Base.metadata
from jobportal.db.session import Base, engine


def create_missing_tables(bind: Engine) -> list[str]:
    existing = set(sa_inspect(bind).get_table_names())
    missing = [table.name for table in Base.metadata.sorted_tables if table.name not in existing]
    Base.metadata.create_all(bind=bind)
    return missing


def main() -> None:
    created = create_missing_tables(engine)
    print(f"tables ensured: created={len(created)} {', '.join(created) or '-'}")


if __name__ == "__main__":
    main()
