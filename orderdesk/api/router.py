"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from orderdesk.api.orders import router as orders_router
from orderdesk.api.admin import router as admin_router
from orderdesk.api.technicians import router as technicians_router
from orderdesk.api.websocket import router as websocket_router

api_router = APIRouter()
api_router.include_router(orders_router)
api_router.include_router(admin_router)
api_router.include_router(technicians_router)
api_router.include_router(websocket_router)
