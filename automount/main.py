import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request

from .api import mount
from .dependencies import get_notification_handler, get_settings
from .logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    settings = get_settings()
    setup_logging(settings)

    logging.info("AutoMount starting up...")
    logging.info(f"QMP endpoint: {settings.qmp_host}:{settings.qmp_port} (watchdog {settings.qmp_watchdog_port})")
    logging.info(f"Mount helper: {settings.mount_helper_base_url}{settings.mount_helper_path}")
    logging.info(f"Data packs: {settings.data_packs_path}")

    await get_notification_handler().subscribe()

    yield

    logging.info("AutoMount shutting down...")


app = FastAPI(
    title="AutoMount",
    description="Attaches game data images to the running VM and registers them with the mount helper",
    version="0.1.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logging.debug(
        f"Incoming request: {request.method} {request.url.path}",
        extra={"operation": "http_request", "method": request.method, "path": request.url.path},
    )
    response = await call_next(request)
    logging.debug(
        f"Response: {response.status_code}",
        extra={"operation": "http_response", "status_code": response.status_code},
    )
    return response


app.include_router(mount.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "service": "automount"}


def run() -> None:
    settings = get_settings()
    uvicorn.run("automount.main:app", host=settings.api_host, port=settings.api_port, log_level="info")


if __name__ == "__main__":
    run()
