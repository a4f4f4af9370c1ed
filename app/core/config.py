from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    APP_NAME: str = "Online Inventory & Documents System"
    DEBUG: bool = False
    PORT: int = 3000

    # Database
    # Required at startup; left optional here so the settings object can be
    # imported by scripts and tests without a live database.
    MONGODB_URI: Optional[str] = None
    DATABASE_NAME: str = "inventory_system"

    # Security
    SECRET_SECURITY_CODE: str = "1234"
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Admin account written by seed.py
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Frontend
    STATIC_DIR: str = "public"

    # Documents
    MAX_UPLOAD_MB: int = 50

    # Activity log
    DUPLICATE_LOG_WINDOW_SECONDS: int = 30
    LOG_LEVEL: str = "INFO"

    # Reports
    PDF_ROWS_PER_PAGE: int = 10
    REPORT_TIMEZONE: str = "Asia/Kuala_Lumpur"
    CURRENCY: str = "RM"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

settings = Settings()
