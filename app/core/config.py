from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")
    db_echo: bool = Field(False, alias="DB_ECHO")
    # A session held longer than this is reported in the logs (not closed).
    session_checkout_warning_seconds: float = Field(5.0, alias="SESSION_CHECKOUT_WARNING_SECONDS")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60 * 24, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    bcrypt_rounds: int = Field(12, alias="BCRYPT_ROUNDS")
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")

    app_url: str = Field("http://localhost:8000", alias="APP_URL")
    public_dir: str = Field("public", alias="PUBLIC_DIR")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    admin_email: Optional[str] = Field(None, alias="ADMIN_EMAIL")
    admin_password: Optional[str] = Field(None, alias="ADMIN_PASSWORD")
    admin_full_name: str = Field("School Administrator", alias="ADMIN_FULL_NAME")
    admin_school_name: str = Field("Assurance Remedial School", alias="ADMIN_SCHOOL_NAME")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
