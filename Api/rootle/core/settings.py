from pydantic import computed_field
from pydantic_settings import SettingsConfigDict, BaseSettings
from pathlib import Path

# Used only when JWT_SECRET is not configured. Not suitable for production.
DEV_FALLBACK_SECRET = "rootle-insecure-development-secret-change-me"


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    JWT_SECRET: str | None = None
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    DATA_DIR: str = "data"
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 20 * 1024 * 1024

    CORS_ORIGINS: list[str] = ["*"]

    @computed_field
    @property
    def USERS_FILE(self) -> Path:
        return Path(self.DATA_DIR) / "users.json"

    @computed_field
    @property
    def FILES_FILE(self) -> Path:
        return Path(self.DATA_DIR) / "files.json"

    @property
    def uses_fallback_secret(self) -> bool:
        return not self.JWT_SECRET

    @property
    def token_secret(self) -> str:
        return self.JWT_SECRET or DEV_FALLBACK_SECRET


settings = Settings()
