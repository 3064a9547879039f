from __future__ import annotations

import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    from persistence import AsyncDocumentProfileRepository, StoreError, UnavailableCollection, connect

    settings = app.state.settings
    try:
        collection = await connect(settings.store_url, timeout_s=settings.store_timeout_s)
        logger.info("Connected to profile store %s", settings.store_url)
    except StoreError as e:
        # Keep serving: reads fall back to the default profile, writes answer 500.
        logger.error("Profile store connection error: %s", e)
        collection = UnavailableCollection(str(e))

    app.state.profile_repository = AsyncDocumentProfileRepository(
        collection,
        user_id=settings.profile_user_id,
        timeout_s=settings.store_timeout_s,
    )
    yield


def create_app() -> FastAPI:
    load_dotenv("local.env")

    from endpoints.profile_endpoints import router as profile_router
    from settings import get_settings

    app = FastAPI(title="Profile Store", lifespan=lifespan)
    app.state.settings = get_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app.state.settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(profile_router)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    from settings import get_settings

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("app listening on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
