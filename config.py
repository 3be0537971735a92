"""Settings schema and YAML loader for the command line tool."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

CONFIG_FILE = "sha256.yaml"
ENV_PREFIX = "SHA256_"


class Settings(BaseModel):
    encoding:      str = Field(default="utf-8", description="Text encoding for message arguments")
    record_rounds: bool = Field(default=False, description="Include per-round registers in traces")
    trace_dir:     Optional[str] = Field(default=None, description="Default directory for trace files")
    verify:        bool = Field(default=False, description="Cross-check digests against hashlib")
    log_level:     str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


def load_config(path: Optional[str] = None, overrides: Optional[dict[str, Any]] = None) -> Settings:
    """Load Settings from a YAML file, then SHA256_<FIELD> env vars, then non-None overrides."""
    config_path = Path(path) if path else Path(CONFIG_FILE)
    data: dict[str, Any] = {}
    if path and not config_path.exists():
        raise ValueError(f"Config file not found: {config_path}")
    if config_path.exists():
        try:
            data = yaml.safe_load(config_path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {config_path}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
