from pydantic_settings import BaseSettings
from typing import Optional, List
import os


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Clinic Appointment System"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    TESTING: bool = os.getenv("TESTING", "0").lower() in ("1", "true", "t", "yes", "y")

    # Database - MySQL, assembled from DB_* unless DATABASE_URL is given
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "clinic"
    DB_PASSWORD: str = ""
    DB_NAME: str = "clinic_db"
    DATABASE_URL: Optional[str] = None
    TEST_DATABASE_URL: str = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")

    # Security
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 300
    BCRYPT_ROUNDS: int = 10

    # Redis (login throttling)
    REDIS_URL: str = "redis://localhost:6379"
    RATE_LIMIT_MAX_REQUESTS: int = 10
    RATE_LIMIT_WINDOW_SECONDS: int = 3600

    # Seeded on first startup when the admins table is empty
    DEFAULT_ADMIN_NAME: str = "Admin"
    DEFAULT_ADMIN_EMAIL: str = "admin@example.com"
    DEFAULT_ADMIN_PASSWORD: str = "password123"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]

    @property
    def get_database_url(self):
        """Return the appropriate database URL based on if we're testing"""
        if self.TESTING:
            return self.TEST_DATABASE_URL
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create settings instance
settings = Settings()
