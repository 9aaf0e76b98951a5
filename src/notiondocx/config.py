"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "NOTIONDOCX_"


class Settings(BaseModel):
    app_name:             str = "notiondocx"
    notion_token:         Optional[str] = Field(default=None, description="Notion integration token")
    database_id:          Optional[str] = Field(default=None, description="Notion database holding the pages")
    output_dir:           str = Field(default="docx", description="Directory for generated .docx files")
    template_path:        Optional[str] = Field(default=None, description=".docx file whose styles every document uses")
    max_image_width:      int = Field(default=650, ge=1, description="Images wider than this (px) are scaled down")
    default_image_size:   int = Field(default=400, ge=1, description="Fallback for an undecodable image dimension")
    indent_inches:        float = Field(default=0.3, gt=0, description="Left indent per nesting level")
    image_timeout:        float = Field(default=30.0, gt=0, description="Seconds before an image download is abandoned")
    log_level:            str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$")
    date_property:        str = "事件日期"
    title_property:       str = "标题"
    authors_property:     str = "记录者"
    responsible_property: str = "负责人"


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then NOTIONDOCX_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
