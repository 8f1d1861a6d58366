from __future__ import annotations
from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

STEAMCMD_TARBALL_URL = "https://steamcdn-a.akamaihd.net/client/installer/steamcmd_linux.tar.gz"

class Settings(BaseSettings):
    config_file: Path = Field(default=Path("/config/dayz-config.yaml"), alias="DAYZ_CONFIG")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    log_dir: Optional[Path] = Field(default=None, alias="LOG_DIR")

    server_app_id: int = Field(default=223350, alias="DAYZ_SERVER_APP_ID")
    workshop_app_id: int = Field(default=221100, alias="DAYZ_WORKSHOP_APP_ID")
    steamcmd_url: str = Field(default=STEAMCMD_TARBALL_URL, alias="STEAMCMD_URL")

    shutdown_grace_seconds: float = Field(default=10.0, alias="SHUTDOWN_GRACE_SECONDS")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)
