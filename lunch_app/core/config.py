"""Application configuration."""

from decimal import Decimal
from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Lunch Orders API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./lunch_orders.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    admin_email: str = getenv("ADMIN_EMAIL", "admin@example.com")
    admin_password: str = getenv("ADMIN_PASSWORD", "change-me")
    local_timezone: str = getenv("APP_TIMEZONE", "America/Toronto")
    tax_rate: Decimal = Decimal(getenv("APP_TAX_RATE", "0.13"))
    urgent_hours: int = int(getenv("APP_URGENT_HOURS", "12"))
    soon_hours: int = int(getenv("APP_SOON_HOURS", "24"))
    refresh_interval_seconds: int = int(getenv("APP_REFRESH_INTERVAL_SECONDS", "60"))
    min_quantity: int = 1
    max_quantity: int = 10
    default_company_name: str = getenv("APP_DEFAULT_COMPANY", "compName01")
    pdf_font_path: str | None = getenv("APP_PDF_FONT") or None


settings: Settings = Settings()
