from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    # Database Configuration - supports either SQLite or PostgreSQL
    SQLITE_DATABASE_URL: Optional[str] = None

    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    POSTGRES_HOST: Optional[str] = None
    POSTGRES_PORT: Optional[int] = None

    @property
    def DATABASE_URL(self) -> str:
        if self.SQLITE_DATABASE_URL:
            return self.SQLITE_DATABASE_URL
        elif all([self.POSTGRES_USER, self.POSTGRES_PASSWORD, self.POSTGRES_DB, self.POSTGRES_HOST, self.POSTGRES_PORT]):
            return f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        else:
            raise ValueError("Database configuration is missing. Please set either SQLITE_DATABASE_URL or all POSTGRES_* variables in your .env file.")

    # Blob storage for manuscript images
    BLOB_STORE_BACKEND: Literal["local", "minio"] = "local"
    UPLOAD_DIR: str = "~/manupedia/uploads"
    UPLOAD_MANUSCRIPTS_SUBDIR: str = "manuscripts"
    MAX_IMAGE_SIZE_MB: int = 20

    # Minio (only used when BLOB_STORE_BACKEND == "minio")
    MINIO_ENDPOINT: Optional[str] = None
    MINIO_ROOT_USER: Optional[str] = None
    MINIO_ROOT_PASSWORD: Optional[str] = None
    MINIO_SECURE: bool = False
    MINIO_BUCKET_MANUSCRIPT_IMAGES: str = "manupedia-manuscript-images"

    # Public address under which stored images are served
    IMAGE_URL_PREFIX: str = "/api/manuscripts/images/"

    # Manuscript records
    DESCRIPTION_MAX_LENGTH: int = 2000
    DEFAULT_PAGE_SIZE: int = 10
    ADMIN_DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    RECENT_UPDATES_WINDOW_DAYS: int = 30
    RECENT_MANUSCRIPTS_LIMIT: int = 5

    # JWT Authentication
    SECRET_KEY: str = "a_very_secret_key_that_should_be_changed"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Logging
    LOG_LEVEL: str = "INFO"

    # API Configuration
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore'

settings = Settings()
