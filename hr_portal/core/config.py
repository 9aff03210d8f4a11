from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Attachments (absence documents, complaint attachments)
    upload_dir: str = Field("storage", alias="UPLOAD_DIR")
    media_url_prefix: str = Field("/storage/", alias="MEDIA_URL_PREFIX")
    max_upload_size_mb: int = Field(10, alias="MAX_UPLOAD_SIZE_MB")

    default_leave_balance: int = Field(30, alias="DEFAULT_LEAVE_BALANCE")

    cors_origins: List[str] = Field(["http://localhost:3000"], alias="CORS_ORIGINS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    initial_admin_email: Optional[str] = Field(None, alias="INITIAL_ADMIN_EMAIL")
    initial_admin_password: Optional[str] = Field(None, alias="INITIAL_ADMIN_PASSWORD")
    initial_admin_name: str = Field("Administrator", alias="INITIAL_ADMIN_NAME")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
