from app.api.http.health import router as health_router
from app.api.http.auth import router as auth_router
from app.api.http.templates import router as templates_router

__all__ = [
    "health_router",
    "auth_router",
    "templates_router"
]
