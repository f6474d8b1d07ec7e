from typing import List

from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_SESSION_SECRET = "dev-secret-change-in-production"


class Settings(BaseSettings):
    # --- Application ---
    PROJECT_NAME: str = "Cloud Kitchen"
    ENVIRONMENT: str = "development"  # development, production
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # --- Database ---
    DATABASE_URL: str = "sqlite:///./cloud_kitchen.db"
    DB_CONNECT_RETRIES: int = 10
    DB_CONNECT_WAIT_SECONDS: int = 3

    # --- Sessions ---
    # Redis only backs logout revocation; without it an in-process map is used.
    REDIS_URL: str | None = None
    SESSION_SECRET: str = DEV_SESSION_SECRET
    SESSION_COOKIE_NAME: str = "ck_session"
    SESSION_MAX_AGE_DAYS: int = 7
    COOKIE_SECURE: bool = False

    # --- Seeding ---
    # Validated like registration emails so a bad address fails at startup
    ADMIN_EMAIL: EmailStr | None = None
    ADMIN_PASSWORD: str | None = None
    SEED_MENU: bool = True

    # --- Business rules ---
    BUSINESS_TIMEZONE: str = "Asia/Kolkata"
    DEFAULT_COUNTRY_CODE: str = "91"
    POS_SYSTEM_ID: str | None = None

    # --- Notifications (optional) ---
    TWILIO_ACCOUNT_SID: str | None = None
    TWILIO_AUTH_TOKEN: str | None = None
    TWILIO_FROM_NUMBER: str | None = None
    ADMIN_PHONE_NUMBER: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
