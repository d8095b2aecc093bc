"""Application configuration loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MOVIE_LIST = Path(__file__).resolve().parent.parent / "resources" / "movielist.csv"

ProducerSplitPolicy = Literal["comma_and", "comma"]


class Settings(BaseSettings):
    app_title: str = Field(default="Movies API", alias="APP_TITLE")
    movie_list_path: Path = Field(default=DEFAULT_MOVIE_LIST, alias="MOVIE_LIST_PATH")
    seed_movies: bool = Field(default=True, alias="SEED_MOVIES")
    producer_split_policy: ProducerSplitPolicy = Field(
        default="comma_and", alias="PRODUCER_SPLIT_POLICY"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
