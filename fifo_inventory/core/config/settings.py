# fifo_inventory/core/config/settings.py

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

ENV_PREFIX = "FIFO_INVENTORY_"

class Settings(BaseSettings):
    """
    Runtime settings for the inventory API, read from FIFO_INVENTORY_* environment
    variables or the project's .env file.
    """
    APP_NAME: str = "FIFO Inventory Engine API"
    APP_VERSION: str = "0.1.0"
    DEBUG_MODE: bool = False # Enables uvicorn reload and FastAPI debug pages

    API_V1_STR: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=8000, ge=1, le=65535)

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Stock and cost sums are exact; 28 digits covers quantity * price for any realistic lot
    DECIMAL_PRECISION: int = Field(default=28, ge=10)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=str(Path(__file__).parent.parent.parent.parent / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

settings = Settings()
