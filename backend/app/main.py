"""FastAPI entrypoint for the gallery backend."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.routers import entries, health, uploads
from .config import load_settings
from .infra.logging import configure_logging


def create_app() -> FastAPI:
    """Instantiate the FastAPI app and register routers."""

    settings = load_settings()
    configure_logging(settings.log_level)
    application = FastAPI(title="Gallery API", version="0.1.0")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    for router in (
        health.router,
        entries.router,
        uploads.router,
    ):
        application.include_router(router)
    if settings.blob_sink.backend == "local":
        application.mount(
            "/media",
            StaticFiles(directory=settings.blob_sink.root_path, check_dir=False),
            name="media",
        )
    return application


app = create_app()
