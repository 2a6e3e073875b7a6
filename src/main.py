import uvicorn
from contextlib import asynccontextmanager

import aiohttp
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.core.exceptions.base import register_exception_handlers
from src.api.core.middleware.logging import logging_middleware
from src.api.core.middleware.security import (
    SecurityHeadersMiddleware,
    PayloadSizeMiddleware,
)
from src.api.router import api_router
from src.utils.settings.app import AppSettings
from src.utils.settings.predictor import get_predictor_settings
from src.utils.logger import setup_logging


app_settings = AppSettings()
is_production = app_settings.is_production


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger = setup_logging(is_production)
    app_settings.validate_prod()
    predictor_settings = get_predictor_settings()
    logger.info(
        "Starting Sargazo Forecast API...",
        predictor_url=predictor_settings.PREDICTOR_BASE_URL,
        window_size=predictor_settings.FORECAST_WINDOW_SIZE,
        input_length=predictor_settings.PREDICTOR_INPUT_LENGTH,
    )

    # One connection pool shared by every request; holds no forecast state
    app.state.http_session = aiohttp.ClientSession()

    yield

    # Shutdown
    await app.state.http_session.close()
    logger.info("Shutting down Sargazo Forecast API...")


app = FastAPI(
    title="Sargazo Forecast API",
    description="Iterative sargassum drift coordinate forecasting",
    version=app_settings.API_VERSION,
    lifespan=lifespan,
    docs_url=None if is_production else "/docs",
    redoc_url=None if is_production else "/redoc",
    openapi_url=None if is_production else "/openapi.json",
)

# Register global exception handlers
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.add_middleware(SecurityHeadersMiddleware, is_production=is_production)
app.add_middleware(
    PayloadSizeMiddleware,
    max_request_size=app_settings.MAX_REQUEST_SIZE,
)
app.middleware("http")(logging_middleware)

app.include_router(api_router)


def run_dev_server():
    """Run development server with auto-reload."""
    uvicorn.run(
        "src.main:app", host="0.0.0.0", port=8010, reload=True, access_log=False
    )


def run_prod_server():
    """Run production server."""
    uvicorn.run(
        "src.main:app", host="0.0.0.0", port=8010, reload=False, access_log=False
    )
