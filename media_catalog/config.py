from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Media Catalog API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    # Server
    HOST: str = '0.0.0.0'
    PORT: int = 8081

    # Database - PostgreSQL
    DATABASE_URL: str
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 5

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # File Storage
    UPLOAD_DIR: str = 'uploads'
    MAX_FILE_SIZE: int = 10485760  # 10MB

    # Admin Account
    FIRST_SUPERUSER_EMAIL: Optional[str] = None
    FIRST_SUPERUSER_PASSWORD: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = 'ignore'

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(',')]

    @property
    def async_database_url(self) -> str:
        """DATABASE_URL rewritten for the asyncpg driver"""
        url = self.DATABASE_URL.split('?')[0]
        return url.replace(
            'postgresql+psycopg2://',
            'postgresql+asyncpg://'
        ).replace(
            'postgresql://',
            'postgresql+asyncpg://'
        )

    @property
    def database_ssl_required(self) -> bool:
        return 'sslmode=require' in self.DATABASE_URL


settings = Settings()
