from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .models import (
    DEFAULT_REGISTRY_URL,
    EmbeddedSource,
    FileSource,
    OnlineRegistrySource,
    RuleSource,
)


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RegistryConfig(BaseModel):
    url: str = DEFAULT_REGISTRY_URL
    timeout_s: float = 10.0


class Settings(BaseModel):
    source: Literal["embedded", "file", "online_registry"] = "embedded"
    rules_path: Optional[str] = None
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    def rule_source(self) -> RuleSource:
        if self.source == "file":
            if not self.rules_path:
                raise ValueError("source 'file' requires rules_path")
            return FileSource(path=self.rules_path)
        if self.source == "online_registry":
            return OnlineRegistrySource(
                url=self.registry.url, timeout_s=self.registry.timeout_s
            )
        return EmbeddedSource()


def load_config(path: Optional[str] = None) -> Settings:
    if not path:
        return Settings()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return Settings()
    data = yaml.safe_load(cfg_path.read_text()) or {}
    return Settings(**data)
