# app/config.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from pathlib import Path
from functools import lru_cache

class Settings(BaseSettings):
    ENV: str = "development"
    DATA_DIR: Path = Path("data")  # where CSV / XLSX tables live
    PRODUCTS_FILE: str = "products.csv"  # can be products.xlsx if you prefer Excel

    image_dir: str = "static/images"
    IMAGE_BASE_URL: str = "/static/images"

    # multipart bodies above this size are rejected before decoding
    MAX_UPLOAD_BYTES: int = 10 << 20

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = ""  # comma separated

    # Example .env:
    # DATA_DIR=./data
    # PRODUCTS_FILE=products.xlsx
    # IMAGE_BASE_URL=http://localhost:8000/static/images

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins(self):
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()

settings = Settings()
