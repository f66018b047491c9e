"""
Markov Chain Service Configuration
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ===== Service =====
    SERVICE_NAME: str = Field(default="markov-chain-service")
    SERVICE_VERSION: str = Field(default="1.0.0")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)
    LOG_LEVEL: str = Field(default="info")
    DEBUG: bool = Field(default=False)

    # ===== CORS =====
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"]
    )

    # ===== Chain storage =====
    CHAIN_DATA_DIR: str = Field(default="./data/chains")
    DEFAULT_CHAIN: str = Field(default="default")
    AUTOLOAD_CHAINS: bool = Field(default=True)
    AUTOSAVE: bool = Field(default=False)

    # ===== Generation =====
    RANDOM_SEED: Optional[int] = Field(default=None)
    MAX_GENERATE_TOKENS: int = Field(default=200, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
