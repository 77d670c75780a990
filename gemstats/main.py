import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI

from .api import router
from .config import settings
from .db import close_db, init_db
from .error_handlers import register_error_handlers
from .logging_setup import setup_logging

logger = logging.getLogger("gemstats.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(Path(settings.db_file))
    logger.info(f"Database ready at {settings.db_file}")
    try:
        yield
    finally:
        close_db()


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(title="Gem Download Stats API", version="1.0.0", lifespan=lifespan)

    register_error_handlers(app)

    # Include REST API routes
    app.include_router(router)

    @app.get("/")
    async def index():
        return {
            "message": "Gem Download Stats API",
            "docs": "/docs",
            "health": "/health",
            "downloads": {
                "total": {"method": "GET", "url": "/api/v1/downloads{.json,.xml,.yaml,.txt}"},
                "top": {"method": "GET", "url": "/api/v1/downloads/top{.json,.xml,.yaml}"},
                "version": {"method": "GET", "url": "/api/v1/downloads/{full_name}{.json,.xml,.yaml}"},
            },
            "versions": {"method": "GET", "url": "/api/v1/versions/{name}{.json,.xml}"},
        }

    return app


app = create_app()


def run() -> None:
    uvicorn.run("gemstats.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
