import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shopfeed.config import get_settings
from shopfeed.infrastructure.database import engine, initialize_database
from shopfeed.infrastructure.notifications import notification_feed
from shopfeed.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables on startup; close live feeds and the pool on shutdown."""

    initialize_database()
    yield
    notification_feed.close_all()
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    logging.getLogger("shopfeed").setLevel(settings.log_level)

    app = FastAPI(title="shopfeed", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
