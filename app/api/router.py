"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from app.api.auth import router as auth_router
from app.api.assets import router as assets_router
from app.api.courses import router as courses_router
from app.api.locations import router as locations_router
from app.api.issues import router as issues_router
from app.api.users import router as users_router
from app.api.contact import router as contact_router
from app.api.dashboard import router as dashboard_router
from app.api.websocket import router as websocket_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(assets_router)
api_router.include_router(courses_router)
api_router.include_router(locations_router)
api_router.include_router(issues_router)
api_router.include_router(users_router)
api_router.include_router(contact_router)
api_router.include_router(dashboard_router)
api_router.include_router(websocket_router)
