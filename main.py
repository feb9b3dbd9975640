# main.py
from __future__ import annotations
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.endpoints import health
from app.api.exception_handlers import EXCEPTION_HANDLERS
from app.api.router import router
from app.core.config import get_settings
from app.core.middleware import RequestLoggingMiddleware
from app.utils.logger import get_logger, setup_logging

setup_logging()
logger = get_logger("app")

settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    swagger_ui_parameters={"persistAuthorization": True},
)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _log_configuration():
    logger.info(
        "pfSense configuration: url=%s user=%s password=%s blocked_alias=%s dhcp_interface=%s",
        settings.pfsense_url or "(not set)",
        settings.pfsense_username or "(not set)",
        settings.masked_password(),
        settings.blocked_alias_name,
        settings.dhcp_interface,
    )
    if not settings.admin_password:
        logger.warning("ADMIN_PASSWORD is not set, every /api call will be refused")


# Health check (no auth required)
app.include_router(health.router, prefix="/health", tags=["_meta"])

# Mount all routes
app.include_router(router, prefix="/api")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
