import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from socialhub.config import get_settings
from socialhub.container import Container, build_container
from socialhub.interfaces.api.routes import register_routes


def create_app(container: Container | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    When ``container`` is omitted one is built from the environment settings
    at startup; either way it is started with the app and cleaned up on
    shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_container = container or build_container(get_settings())
        try:
            app_container.start()
            app.state.container = app_container
            yield
        finally:
            app_container.cleanup()

    settings = container.settings if container is not None else get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="SocialHub Notifications", lifespan=lifespan)
    register_routes(app)
    return app


app = create_app()
