"""Configuration handling using Pydantic settings."""

from pathlib import Path
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Input
    LISTINGS_PATH: Optional[Path] = Field(default=None)
    AMENITIES_COLUMN: str = Field(default="amenities")

    # Vocabulary selection
    MIN_COUNT: int = Field(default=200, ge=0)
    COUNT_MODE: Literal["occurrence", "listing"] = Field(default="occurrence")
    EXTRA_EXCLUDED: List[str] = Field(default_factory=list)
    VOCAB_PATH: Path = Field(default=Path("./out/vocabulary.json"))

    # Output options
    OUTPUT_FORMAT: Literal["csv", "sqlite"] = Field(default="csv")
    OUTPUT_PATH: Path = Field(default=Path("./out/listings_features.csv"))
    SQLITE_TABLE: str = Field(default="listings")

    LOG_LEVEL: str = Field(default="INFO")


settings = Settings()
