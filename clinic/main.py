from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import time
import logging

from .api.v1.auth import router as auth_router
from .api.v1.users import router as users_router
from .api.v1.doctors import router as doctors_router
from .api.v1.admins import router as admins_router
from .api.v1.catalog import router as catalog_router
from .api.v1.schedules import router as schedules_router
from .api.v1.appointments import router as appointments_router
from .api.v1.queue import router as queue_router
from .api.v1.announcements import router as announcements_router
from .api.v1.patient_info import router as patient_info_router
from .api.v1.stats import router as stats_router
from .core.config import settings
from .core.database import get_db, init_db

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Clinic appointment booking against daily AM/PM capacity, with a visit queue",
    openapi_url="/api/v1/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Middleware setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Only add TrustedHostMiddleware in production, not in testing
if not settings.TESTING:
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=["localhost", "127.0.0.1", "*.localhost", "testserver"]
    )


# Custom middleware for request logging and timing
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.4f}s"
    )

    return response


# Exception handlers
@app.exception_handler(404)
async def not_found_handler(request: Request, exc: HTTPException):
    detail = getattr(exc, "detail", None) or "Not Found"
    return JSONResponse(
        status_code=404,
        content={
            "error": "Not Found",
            "detail": detail,
            "message": detail if detail != "Not Found" else "The requested resource was not found",
            "path": str(request.url.path)
        }
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Internal server error on {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred"
        }
    )


# Include routers
for router in (
    auth_router,
    users_router,
    doctors_router,
    admins_router,
    catalog_router,
    schedules_router,
    appointments_router,
    queue_router,
    announcements_router,
    patient_info_router,
    stats_router,
):
    app.include_router(router, prefix="/api/v1")


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    logger.info("Starting Clinic Appointment System...")

    db_url = settings.get_database_url
    db_type = "MySQL" if db_url.startswith("mysql") else "SQLite" if "sqlite" in db_url else "Unknown"
    logger.info(f"Using {db_type} database")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise

    logger.info("Application startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on application shutdown."""
    logger.info("Shutting down Clinic Appointment System...")


# Health check endpoint
@app.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """Liveness plus a round trip to the database."""
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.warning(f"Health check could not reach the database: {str(e)}")
        database = "unavailable"

    return {
        "status": "healthy" if database == "ok" else "degraded",
        "database": database,
        "timestamp": time.time(),
        "version": settings.VERSION
    }


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Welcome to the Clinic Appointment System API",
        "version": settings.VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health"
    }


# API Info endpoint
@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": settings.APP_NAME,
        "version": settings.VERSION,
        "endpoints": {
            "authentication": "/api/v1/auth",
            "users": "/api/v1/users",
            "doctors": "/api/v1/doctors",
            "admins": "/api/v1/admins",
            "specialties": "/api/v1/doctor-specialties",
            "purposes": "/api/v1/purposes",
            "schedules": "/api/v1/schedules",
            "appointments": "/api/v1/appointments",
            "queue": "/api/v1/queue",
            "announcements": "/api/v1/announcements",
            "stats": "/api/v1/stats",
            "docs": "/docs",
            "openapi": "/api/v1/openapi.json"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "clinic.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
