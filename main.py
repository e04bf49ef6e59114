from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv
import os
import sys
import logging

from models.api_models import ErrorResponse, HealthResponse
from routers import analyses, transcripts
from services.database import close_engine, init_db

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Validate required environment variables
REQUIRED_ENV_VARS = ["DATABASE_URL", "OPENAI_API_KEY"]

DEFAULT_PORT = 3001
DEFAULT_FRONTEND_URL = "http://localhost:5173"


def validate_environment():
    """Validate that all required environment variables are set."""
    missing = [var for var in REQUIRED_ENV_VARS if not os.getenv(var)]
    if missing:
        logger.error(f"Missing required environment variables: {missing}")
        sys.exit(1)
    logger.info("Environment validation passed")


# Call validation at startup
validate_environment()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema on startup and release the connection pool on shutdown."""
    logger.info("Starting meeting transcript analyzer...")
    await init_db()
    yield
    logger.info("Shutting down meeting transcript analyzer...")
    await close_engine()


app = FastAPI(
    title="Meeting Transcript Analyzer",
    description="Extracts sentiment, action items and decisions from meeting transcripts",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[os.getenv("FRONTEND_URL", DEFAULT_FRONTEND_URL)],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(transcripts.router)
app.include_router(analyses.router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.warning(f"Invalid request body: path={request.url.path}, errors={len(errors)}, first={message}")
    return JSONResponse(status_code=400, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error: path={request.url.path}, error={type(exc).__name__}: {exc}",
        exc_info=exc
    )
    return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", DEFAULT_PORT)),
    )
