import os
from decimal import Decimal
from typing import List
from dotenv import load_dotenv

# grab env vars from .env file
load_dotenv()


def _flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # app settings
    APP_ENV: str = os.getenv("APP_ENV", "dev")
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = int(os.getenv("APP_PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS stuff
    _origins_raw: str = os.getenv("ALLOWED_ORIGINS", "*")
    ALLOWED_ORIGINS: List[str] = [o.strip() for o in _origins_raw.split(",") if o.strip()] if _origins_raw else ["*"]

    # database config with separate creds
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
    DB_NAME: str = os.getenv("DB_NAME", "storefront")
    DB_USER: str = os.getenv("DB_USER", "storefront_user")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
    DB_SSL_MODE: str = os.getenv("DB_SSL_MODE", "require")
    DB_CONNECTION_TIMEOUT: int = int(os.getenv("DB_CONNECTION_TIMEOUT", "30"))
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))

    @property
    def DATABASE_URL(self) -> str:
        """build DATABASE_URL from individual components or use explicit override"""
        # check if DATABASE_URL is explicitly set in env (for testing)
        explicit_url = os.getenv("DATABASE_URL")
        if explicit_url:
            return explicit_url

        return (
            f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}@"
            f"{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?sslmode={self.DB_SSL_MODE}&connect_timeout={self.DB_CONNECTION_TIMEOUT}"
        )

    # tokens come from the managed auth provider, we only verify them
    AUTH_JWT_SECRET: str = os.getenv("AUTH_JWT_SECRET", "change_me_very_long")
    AUTH_JWT_ALGORITHM: str = os.getenv("AUTH_JWT_ALGORITHM", "HS256")
    AUTH_JWT_AUDIENCE: str | None = os.getenv("AUTH_JWT_AUDIENCE") or None

    # storefront rules
    STORE_WHATSAPP_PHONE: str = os.getenv("STORE_WHATSAPP_PHONE", "5584988760462")
    MINIMUM_ORDER: Decimal = Decimal(os.getenv("MINIMUM_ORDER", "25"))
    DELIVERY_ETA_MINUTES: int = int(os.getenv("DELIVERY_ETA_MINUTES", "50"))

    # admin module toggles
    FEATURE_COUPONS: bool = _flag("FEATURE_COUPONS")
    FEATURE_LOYALTY: bool = _flag("FEATURE_LOYALTY")


settings = Settings()
