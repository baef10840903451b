"""
Service settings, read from CSVJSON_* environment variables or a .env file.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CSVJSON_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Root logging level")
    max_upload_bytes: int = Field(default=5 * 1024 * 1024, description="Largest accepted upload")
    json_indent: int = Field(default=2, description="Indent of the rendered JSON output")
    accepted_extensions: List[str] = Field(
        default=[".csv", ".tsv", ".txt"],
        description="Upload file extensions treated as delimited text",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
