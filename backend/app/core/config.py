"""Application configuration.

Environment variables override all defaults.
Loaded once at import time; tests override DATABASE_URL before importing the app.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv


# Load .env for local development; real environment variables win
_BACKEND_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=_BACKEND_DIR / ".env", override=False)


def _split_csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings:
    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./medstore.db")
    SEED_CATALOG: bool = os.getenv("SEED_CATALOG", "true").lower() in ("1", "true", "yes")

    # Shopper identity. No auth: the X-User-Id header wins, this is the fallback.
    DEFAULT_USER_ID: str = os.getenv("DEFAULT_USER_ID", "user123")

    # CORS (storefront dev servers)
    CORS_ORIGINS: List[str] = _split_csv(
        os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000",
        )
    )

    # Prescription uploads
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "./prescriptions")
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
    ALLOWED_PRESCRIPTION_EXTENSIONS: List[str] = [".jpg", ".jpeg", ".png", ".pdf"]

    # Catalog policies
    LOW_STOCK_THRESHOLD: int = int(os.getenv("LOW_STOCK_THRESHOLD", "10"))
    FEATURED_COUNT: int = int(os.getenv("FEATURED_COUNT", "6"))

    # Runtime
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")


settings = Settings()
