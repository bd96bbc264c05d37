import logging
import os
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from photogallery.database import Base, engine
from photogallery.routers.accounts import router as accounts_router
from photogallery.routers.photos import router as photos_router
from photogallery.storage import UPLOADS_DIR

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format=LOG_FORMAT,
)
logger = logging.getLogger(__name__)


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Catch anything the routes did not handle and return a generic 500.
    The exception is logged with its traceback; the client only sees a
    fixed message."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled error on %s %s", request.method, request.url.path
            )
            return JSONResponse(
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": "Internal server error"},
            )


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # Ensure database tables and the upload directory exist
    Base.metadata.create_all(bind=engine)
    Path(UPLOADS_DIR).mkdir(parents=True, exist_ok=True)
    logger.info("Photo gallery started (uploads in %s)", UPLOADS_DIR)
    yield
    engine.dispose()
    logger.info("Photo gallery stopped")


app = FastAPI(title="Photo Gallery API", lifespan=lifespan)

app.add_middleware(UnhandledErrorMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(accounts_router)
app.include_router(photos_router)

# Uploaded files; check_dir is off since the lifespan creates the directory
app.mount(
    "/uploads",
    StaticFiles(directory=UPLOADS_DIR, check_dir=False),
    name="uploads",
)

__all__ = ["app"]
