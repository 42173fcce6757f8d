from __future__ import annotations

import logging
import os

import uvicorn

from jobportal.core.config import settings

_LOG = logging.getLogger("jobportal.server")


def worker_count() -> int:
    if not settings.is_production:
        return 1
    if settings.WEB_CONCURRENCY > 0:
        return settings.WEB_CONCURRENCY
    return os.cpu_count() or 1


def main() -> None:
    workers = worker_count()
    _LOG.info("starting %s env=%s workers=%s port=%s", settings.APP_NAME, settings.APP_ENV, workers, settings.PORT)
    uvicorn.run(
        "jobportal.main:app",
        host=settings.HOST,
        port=settings.PORT,
        workers=workers,
        reload=not settings.is_production,
        proxy_headers=True,
        log_level="info",
    )


if __name__ == "__main__":
    main()
