"""Configuration management"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Secret Key
    SECRET_KEY: str = "change-this-to-a-random-secret-key"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/reeltrack.db"

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours
    ALGORITHM: str = "HS256"

    # Directories
    BASE_DIR: Path = Path(__file__).parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    LOGS_DIR: Path = DATA_DIR / "logs"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ALLOWED_ORIGINS: Optional[str] = None  # Comma-separated origins for main API

    # Catalogue
    DEFAULT_PAGE_LIMIT: int = 100
    SEARCH_LIMIT: int = 50
    EXPORT_VERSION: str = "2.0"

    class Config:
        env_file = ".env"
        case_sensitive = True

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Ensure directories exist
        self.DATA_DIR.mkdir(exist_ok=True, parents=True)
        self.LOGS_DIR.mkdir(exist_ok=True, parents=True)


# Global settings instance
settings = Settings()
