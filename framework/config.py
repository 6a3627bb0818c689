from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Basic configuration ---
    APP_NAME: str = "MAT Backend"
    APP_DESCRIPTION: str = "Record store for assessment users, tenants and credentials, with report relay endpoints"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"  # development, production, testing
    DEBUG: bool = True

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    WEB_WORKERS: int = 1  # Document lock is per-process; keep 1 unless writes are rare

    # --- Document store (JSON file) ---
    DB_PATH: str = "db.json"

    # --- Security ---
    # False keeps passwords verbatim (legacy file format); True stores bcrypt hashes
    HASH_PASSWORDS: bool = False
    CORS_ORIGINS: List[str] = ["*"]

    # --- Logging ---
    LOG_DIR: str = "logs"

    # --- Azure Automation ---
    AZURE_SUBSCRIPTION_ID: Optional[str] = None
    AZURE_RESOURCE_GROUP: str = "mat-automation-rg"
    AZURE_AUTOMATION_ACCOUNT: str = "mat-automation-account"

    # --- Report webhook ---
    REPORT_WEBHOOK_URL: Optional[str] = None
    REPORT_WEBHOOK_VERIFY_TLS: bool = True
    REPORT_WEBHOOK_TIMEOUT: float = 30.0

    # --- Blob download links ---
    BLOB_ACCOUNT_URL_TEMPLATE: str = "https://{account}.blob.core.windows.net"
    DOWNLOAD_LINK_TTL_SECONDS: int = 3600

    # --- API route prefixes ---
    AUTH_PREFIX: str = ""
    USERS_PREFIX: str = "/users"
    REPORTS_PREFIX: str = "/api"

    # --- Gunicorn process name (optional) ---
    GUNICORN_PROC_NAME: Optional[str] = None  # Fallback to APP_NAME when empty

    # --- Pydantic ---
    # Load env from project root .env; priority: env vars > .env > defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Singleton settings instance
settings = Settings()
