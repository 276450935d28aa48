import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from dialogue_api import __version__
from dialogue_api.api.deps import get_dialogue_repository
from dialogue_api.api.routes import audio, dialogues
from dialogue_api.core.config import settings
from dialogue_api.core.logging import configure_logging

logger = logging.getLogger(__name__)

HEALTH_MESSAGE = "Dialogue API is Running 🚀"


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    try:
        await asyncio.to_thread(get_dialogue_repository().ensure_indexes)
        logger.info("Connected to MongoDB")
    except Exception as e:
        # сервис поднимается; запросы к базе вернут 500
        logger.warning(f"MongoDB is not available at startup: {e}")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Dialogue API",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse, tags=["health"])
    async def health() -> str:
        return HEALTH_MESSAGE

    app.include_router(dialogues.router)
    app.include_router(audio.router)
    return app


app = create_app()


def main() -> None:
    configure_logging(settings.log_level)
    logger.info(f"Server running on {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port,
                log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
