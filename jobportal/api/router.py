from fastapi import APIRouter
from jobportal.api import dashboard, web
from jobportal.api.resources import build_resource_router
from jobportal.entities import ENTITIES

router = APIRouter()
router.include_router(web.router, prefix="/web", tags=["Web"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
for config in ENTITIES:
    router.include_router(build_resource_router(config), prefix=f"/{config.name}", tags=[config.plural_label])
