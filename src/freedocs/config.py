"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from freedocs.core.models import ParseOptions


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "FREEDOCS_"


class Settings(BaseModel):
    app_name:          str = "freedocs"
    auto_detect_code:  bool = Field(default=True,  description="Detect code and numbered-list groups in paragraphs")
    show_deletions:    bool = Field(default=True,  description="Keep removed (-) code lines")
    extract_images:    bool = Field(default=True,  description="Emit image blocks for <img> elements")
    adapter_threshold: float = Field(default=1.0, ge=0, description="Minimum adapter score before falling back to plain text")
    output_dir:        str = Field(default="dist", description="Directory for parse output (JSON + HTML)")
    request_timeout:   float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    cache_ttl:         int = Field(default=3600, ge=0, description="Content cache lifetime in seconds; 0 disables")
    max_retries:       int = Field(default=2, ge=1, description="Attempts per archive service")
    circuit_threshold: int = Field(default=3, ge=1, description="Failures before a service's circuit opens")
    circuit_timeout:   float = Field(default=180.0, ge=0, description="Seconds a circuit stays open")
    user_agent:        str = Field(default="Mozilla/5.0 (compatible; FreeDocs/1.0)")
    log_level:         str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    def parse_options(self, base_url: str = None) -> ParseOptions:
        return ParseOptions(
            auto_detect_code=self.auto_detect_code,
            show_deletions=self.show_deletions,
            extract_images=self.extract_images,
            base_url=base_url,
        )


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then FREEDOCS_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
