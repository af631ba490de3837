from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./app.db"
    # Dev convenience; production schema is managed by alembic
    create_tables_on_startup: bool = False

    # JWT
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # 1 day
    refresh_token_expire_minutes: int = 60 * 24 * 10  # 10 days

    # Cookies carrying access/refresh tokens (set True behind HTTPS)
    cookie_secure: bool = False

    # Frontend URL for CORS
    frontend_url: str = "http://localhost:3000"

    # Media host: folder for stored assets (empty = backend/uploads/media) and public URL prefix
    media_dir: str = ""
    media_base_url: str = "/media"

    # Temporary folder for incoming multipart files (empty = backend/uploads/tmp)
    temp_upload_dir: str = ""

    log_level: str = "INFO"

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
