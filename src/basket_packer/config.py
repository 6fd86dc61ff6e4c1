"""Environment-driven settings; loads .env locally via python-dotenv."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from basket_packer.packing.strategies import DEFAULT_STRATEGIES, PackingStrategy, load_strategies

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    log_level: str = "INFO"
    strategies_file: Optional[Path] = None
    max_workers: int = Field(default=1, ge=1)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{value}'. Valid: {list(LOG_LEVELS)}")
        return level


def load_settings() -> Settings:
    """Read BASKET_PACKER_* variables; a .env file never overrides the environment."""
    load_dotenv()
    return Settings(
        log_level=os.getenv("BASKET_PACKER_LOG_LEVEL", "INFO"),
        strategies_file=os.getenv("BASKET_PACKER_STRATEGIES_FILE") or None,
        max_workers=os.getenv("BASKET_PACKER_MAX_WORKERS", "1"),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def resolve_strategies(settings: Settings) -> list[PackingStrategy]:
    if settings.strategies_file is None:
        return list(DEFAULT_STRATEGIES)
    return load_strategies(settings.strategies_file)
