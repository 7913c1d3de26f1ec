"""
Portfolio API - projects, categories and moderated comments with a single admin
"""

from contextlib import asynccontextmanager
from pathlib import Path
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from admin_tools import admin_router
from auth import auth_router
from backend.utils.errors import AppError, InternalError, validation_error_fields
from backend.utils.responses import error_response, success_response
from config.settings import settings
from database import create_database, init_db
from routers.categories_router import categories_router
from routers.comments_router import comments_router
from routers.projects_router import router as projects_router

# Logging setup - write ALL events to /logs/app.log
LOGS_DIR = Path("./logs")
LOGS_DIR.mkdir(exist_ok=True)
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(LOGS_DIR / "app.log"),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the connection pool at startup and close it at shutdown"""
    if not settings.jwt_secret_key:
        logger.error("JWT_SECRET_KEY is not set. Refusing to start.")
        raise RuntimeError("JWT_SECRET_KEY must be set")

    database = create_database(settings)
    try:
        await init_db(database, settings)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        await database.dispose()
        raise

    app.state.database = database
    app.state.settings = settings
    try:
        yield
    finally:
        await database.dispose()
        logger.info("Database connections closed")


app = FastAPI(title="Portfolio API", lifespan=lifespan)
app.state.settings = settings


# Uncaught exception middleware - logs all unhandled exceptions and returns 500
class UncaughtExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Uncaught exception on {request.method} {request.url.path}: {e}\n{traceback.format_exc()}")
            error = InternalError()
            return error_response(error.error_code, status=error.status_code, message=error.message)


# Security headers middleware
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add X-Frame-Options, X-Content-Type-Options and, in production, HSTS"""
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        return response


app.add_middleware(UncaughtExceptionMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

# CORS MUST be near the bottom
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return error_response(exc.error_code, status=exc.status_code, message="Internal server error")
    return error_response(exc.error_code, status=exc.status_code, message=exc.message, data=exc.data)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(
        "bad_request",
        status=400,
        message="Invalid request",
        data={"fields": validation_error_fields(exc.errors())},
    )


# Serve uploaded project images
app.mount("/uploads", StaticFiles(directory=str(settings.uploads_dir), check_dir=False), name="uploads")


@app.get("/api/health")
async def health():
    return success_response(data={"status": "ok"}, message="Portfolio API is running")


app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(projects_router)
app.include_router(categories_router)
app.include_router(comments_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
