import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI

from configs import app_config
from exceptions import exception_handler
from middlewares.http_middleware import CustomMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up the http builtin host...")
    yield
    from core.http_builtin import get_default_builtin

    get_default_builtin().cache_store.clear()


def config_router(app: FastAPI):
    from routers import builtins, help

    app.include_router(help.router)
    app.include_router(builtins.router)


def initialize_extensions(app: FastAPI):
    from extensions import ext_logging

    extensions = [
        ext_logging,
    ]
    for ext in extensions:
        short_name = ext.__name__.split(".")[-1]
        is_enabled = ext.is_enabled() if hasattr(ext, "is_enabled") else True
        if not is_enabled:
            if app_config.DEBUG:
                logger.info("Skipped %s", short_name)
            continue

        start_time = time.perf_counter()
        ext.init_app(app)
        end_time = time.perf_counter()
        if app_config.DEBUG:
            logger.info(
                "Loaded %s (%s ms)",
                short_name,
                round((end_time - start_time) * 1000, 2),
            )


def create_app() -> FastAPI:
    app = FastAPI(
        title=app_config.PROJECT_NAME,
        lifespan=lifespan,
        version=app_config.CURRENT_VERSION,
        openapi_url="/api/openapi.json",
    )
    initialize_extensions(app)

    app.add_middleware(CustomMiddleware)

    config_router(app)
    exception_handler.set_up(app)

    logger.info(f"http builtin host created: {app_config.PROJECT_NAME}")
    return app
