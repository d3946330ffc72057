# bjjconnect/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bjjconnect.core.config import settings
from bjjconnect.core.errors import register_error_handlers
from bjjconnect.core.logging import configure_logging
from bjjconnect.core.middleware import RequestLogMiddleware
from bjjconnect.db.sql import init_db
from bjjconnect.routers import auth, health, sessions, users


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Configure logging and, in development, create missing tables.
    """
    configure_logging()
    if settings.DB_AUTO_CREATE:
        await init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="BJJ Connect API",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLogMiddleware)
    register_error_handlers(app)

    # Routing
    app.include_router(health.router, prefix=settings.API_PREFIX, tags=["health"])
    app.include_router(auth.router, prefix=settings.API_PREFIX, tags=["auth"])
    app.include_router(sessions.router, prefix=settings.API_PREFIX, tags=["sessions"])
    app.include_router(users.router, prefix=settings.API_PREFIX, tags=["users"])

    @app.get("/")
    def root():
        return {"success": True, "message": "BJJ Connect API running"}

    return app


app = create_app()
