# server/main.py

import asyncio
import logging
from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from server.api.schema import create_graphql_router
from server.config import get_settings
from server.database import init_db, init_engine
from server.logging_config import setup_logging


logger = logging.getLogger(__name__)


def _log_unhandled(loop, context):
    logger.error(
        "Unhandled exception in event loop: %s",
        context.get("message"),
        exc_info=context.get("exception"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    asyncio.get_running_loop().set_exception_handler(_log_unhandled)
    init_db()
    logger.info("GraphQL endpoint ready at /graphql")
    yield


def create_app() -> FastAPI:
    """
    Builds the API. Fails with ConfigurationError when no JWT secret is set.
    """
    settings = get_settings()
    setup_logging(settings.log_level)
    settings.require_secret()

    init_engine(settings.database_url)

    app = FastAPI(title="Bookshelf", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_graphql_router(settings.debug), prefix="/graphql")

    return app


def run():
    settings = get_settings()
    uvicorn.run(create_app(), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
