import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from waitstop.api.deps import build_trip_planner
from waitstop.api.v1.api import api_router
from waitstop.core.config import settings
from waitstop.middleware.request_logging import RequestLoggingMiddleware
from waitstop.utils import logger as _  # noqa: F401 - Import to configure logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.trip_planner = build_trip_planner(settings)
    logger.info("Starting %s version v%s", settings.PROJECT_NAME, settings.VERSION)
    yield
    await app.state.trip_planner.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_DESCRIPTION,
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

# Include API v1 router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def read_root():
    return {"message": "Welcome to Waitstop API"}
