from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
import logging
import sqlite3

from career_compass.core.config import get_settings
from career_compass.core.errors import EngineError, InputValidationError, NotFoundError
from career_compass.core.logging_config import setup_logging
from career_compass.routers import competencies, health, match, people, roadmaps, roles

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Career Compass",
    description="Competency matching, gap analysis and career roadmap generation.",
    version="0.1.0",
    openapi_tags=[
        {"name": "health", "description": "Service health"},
        {"name": "roles", "description": "Role catalog"},
        {"name": "competencies", "description": "Competency taxonomy"},
        {"name": "people", "description": "Competency profiles, analyses and roadmaps per person"},
        {"name": "roadmaps", "description": "Roadmap progress tracking"},
        {"name": "match", "description": "Ad-hoc scoring"},
    ],
)

# Install CORS middleware early so that OPTIONS preflight is handled
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers (structured, no sensitive details)
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.detail})


@app.exception_handler(InputValidationError)
async def input_validation_handler(request: Request, exc: InputValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.detail})


@app.exception_handler(EngineError)
async def engine_error_handler(request: Request, exc: EngineError):
    logger.warning("Unhandled engine error on %s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=503, content={"detail": "Service temporarily degraded"})


@app.exception_handler(sqlite3.DatabaseError)
async def sqlite_error_handler(request: Request, exc: sqlite3.DatabaseError):
    logger.error("Database error on %s %s: %s", request.method, request.url.path, type(exc).__name__)
    return JSONResponse(status_code=400, content={"detail": "Database operation failed"})


# Ensure standard HTTP exceptions pass through (do not override FastAPI/Starlette defaults)
@app.exception_handler(StarletteHTTPException)
async def http_exception_passthrough(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # CORS preflight carries no body; let the middleware answer it
    if request.method.upper() == "OPTIONS":
        return JSONResponse(status_code=204, content=None)
    return JSONResponse(status_code=422, content={"detail": exc.errors()})


# Catch-all for truly unhandled exceptions only
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Routers
app.include_router(health.router)
app.include_router(roles.router)
app.include_router(competencies.router)
app.include_router(people.router)
app.include_router(roadmaps.router)
app.include_router(match.router)
