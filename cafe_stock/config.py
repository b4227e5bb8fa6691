# cafe_stock/config.py
import logging
import os
from pathlib import Path
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator
from rich.logging import RichHandler

from .models import DEFAULT_LOW_STOCK_THRESHOLD

ENV_PREFIX = "CAFE_STOCK_"

# Same key the café page uses in localStorage.
STORAGE_KEY = "wingsCafeProducts"
EXPORT_FILENAME = "wings-cafe-data.json"

class Settings(BaseModel):
    """Runtime configuration, read from CAFE_STOCK_* environment variables."""

    data_file: Path = Field(default=Path("wings-cafe-storage.json"))
    storage_key: str = Field(default=STORAGE_KEY, min_length=1)
    low_stock_threshold: int = Field(default=DEFAULT_LOW_STOCK_THRESHOLD, ge=0)
    api_url: str = Field(default="http://127.0.0.1:8085")
    port: int = Field(default=8085, ge=1, le=65535)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**values)

def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
