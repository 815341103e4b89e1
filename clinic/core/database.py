from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import redis
from .config import settings

database_url = settings.get_database_url

if database_url.startswith("sqlite"):
    # SQLite is only used by the test suite; TestClient calls from another thread
    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False},
    )
else:
    # MySQL setup with appropriate connection pool settings
    engine = create_engine(
        database_url,
        pool_size=10,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,  # MySQL drops idle connections after wait_timeout
        pool_pre_ping=True,
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Connections are opened lazily, on the first command
redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)


# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Redis dependency
def get_redis():
    """Get Redis client."""
    return redis_client


# Database initialization
def init_db():
    """Create tables and seed the default admin account."""
    from .. import models  # noqa: F401  registers every table on Base.metadata
    from ..services.admin_service import AdminService

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        AdminService(db).ensure_default_admin()
    finally:
        db.close()
