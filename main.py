"""
Main FastAPI application entry point.
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging
from contextlib import asynccontextmanager

from grocery_compare.core.config import settings
from grocery_compare.core.database import SessionLocal, init_db
from grocery_compare.core.exceptions import InvalidInput, RepositoryUnavailable, MalformedRecord
from grocery_compare.routers import api_router
from grocery_compare.services.sample_data import seed_sample_data

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.log_format,
)
logger = logging.getLogger(__name__)


# Lifespan context manager for startup/shutdown events
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables and optionally seed demo data
    init_db()
    if settings.SEED_SAMPLE_DATA:
        db = SessionLocal()
        try:
            if seed_sample_data(db):
                logger.info("🌱 Sample stores and prices loaded")
        finally:
            db.close()
    logger.info(f"🚀 {settings.app_name} {settings.app_version} started ({settings.ENVIRONMENT})")

    yield

    logger.info("🛑 Shutting down")


# Create FastAPI app with lifespan
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)


def _error_content(detail: str, exc: Exception) -> dict:
    content = {"detail": detail}
    if settings.debug:
        content["error_type"] = type(exc).__name__
    return content


# Catch anything the exception handlers below did not
@app.middleware("http")
async def catch_unhandled_errors(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        # Log the full error for debugging
        logger.error(f"Request failed: {str(e)}", exc_info=True)

        # Return detailed error in development, generic in production
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_content(str(e) if settings.debug else "Internal server error", e)
        )


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    """Bad caller input: never retried"""
    logger.warning(f"Invalid input on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_content(str(exc), exc)
    )


@app.exception_handler(RepositoryUnavailable)
async def repository_unavailable_handler(request: Request, exc: RepositoryUnavailable):
    """Storage failed as a whole; distinct from an empty result"""
    logger.error(f"Repository unavailable on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=_error_content(str(exc), exc)
    )


@app.exception_handler(MalformedRecord)
async def malformed_record_handler(request: Request, exc: MalformedRecord):
    """Stored data in an unrecognised shape"""
    logger.error(f"Malformed record on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content(str(exc) if settings.debug else "Malformed stored record", exc)
    )


# Add exception handler for validation errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors with detailed messages"""
    errors = exc.errors()
    error_messages = []

    for error in errors:
        field = " -> ".join(str(x) for x in error["loc"])
        message = error["msg"]
        error_type = error["type"]
        error_messages.append(f"{field}: {message} (type: {error_type})")

    logger.error(f"Validation error: {error_messages}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation Error",
            "errors": error_messages,
        }
    )


# Include API router
app.include_router(api_router, prefix="/api")


@app.get("/")
def read_root():
    """Root endpoint for health check."""
    return {
        "status": "ok",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.LOG_LEVEL.lower(),
    )
