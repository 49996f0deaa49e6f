from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    APP_ENV: str = "development"
    DEBUG: bool = True
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    # Database – SQLite for local development
    DATABASE_URL: str = "sqlite+aiosqlite:///./fleetfusion.db"

    # Redis – Celery broker and the optional HOS cache
    REDIS_URL: str = "redis://localhost:6379/0"

    # Security – access tokens are issued by the identity provider with this shared key
    SECRET_KEY: str = "dev_secret_key_change_in_production_min_32_chars!!"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # When set, identity webhooks must send this value in X-Webhook-Secret.
    # Leave empty for local development only.
    IDENTITY_WEBHOOK_SECRET: str = ""

    # HOS
    HOS_CACHE_ENABLED: bool = False
    HOS_CACHE_TTL_SECONDS: int = 60
    DEFAULT_TIMEZONE: str = "America/Denver"

    # Compliance documents
    EXPIRING_DOCUMENT_DAYS: int = 30

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
