from __future__ import annotations

from fastapi import FastAPI

from authcore.api.routers.auth import router as auth_router
from authcore.core.logging_config import configure_logging
from authcore.shared.config import get_settings


def create_app() -> FastAPI:
    configure_logging(get_settings().log_level)
    application = FastAPI(title="Auth API")
    application.include_router(auth_router)
    return application


app = create_app()
