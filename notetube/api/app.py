"""
FastAPI application for NoteTube.
"""

import time
import traceback
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notetube.config import config
from notetube.api.library import router as library_router
from notetube.api.routes import router
from notetube.db.database import init_db
from notetube.exceptions import ConfigurationError
from notetube.services import build_services
from notetube.utils.logger import logging

# FastAPI application
app = FastAPI(
    title=config.APP_NAME,
    version=config.APP_VERSION,
    description="An API that turns YouTube videos into AI study notes",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.services = None


@app.on_event("startup")
async def startup_event():
    """Initialize the database and the shared services."""
    init_db()
    logging.info("Database initialized")

    try:
        app.state.services = build_services()
        logging.info("Services initialized")
    except ConfigurationError as e:
        logging.error(f"Services unavailable: {str(e)}")


@app.on_event("shutdown")
async def shutdown_event():
    services = app.state.services
    if services is not None:
        await services.aclose()


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Middleware to add processing time header to responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled exceptions."""
    logging.error(f"Unhandled error on {request.url.path}: {str(exc)}")
    logging.error(traceback.format_exc())
    return JSONResponse(
        status_code=500,
        content={"detail": f"An unexpected error occurred: {str(exc)}"},
    )


# Include API routers
app.include_router(router)
app.include_router(library_router)


# Root
@app.get("/")
async def root():
    """Root endpoint returning basic API information."""
    return {
        "name": config.APP_NAME,
        "version": config.APP_VERSION,
        "description": "NoteTube AI study notes API",
    }
