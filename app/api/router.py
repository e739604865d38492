from fastapi import APIRouter
from app.api.http import health_router, auth_router, templates_router
from app.api.ws.templates import router as templates_websocket_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(templates_websocket_router)
api_router.include_router(templates_router)
