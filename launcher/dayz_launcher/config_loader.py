from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Mapping
import yaml
from .models import DayZConfig, ModEntry, PathsConfig, ServerSettings
from .resolver import Resolution, resolve
from .errors import MissingDependencyError
from .logging_setup import get_logger

log = get_logger("dayz.launcher.config")

def load_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping")
    return data

def save_config(cfg: DayZConfig, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    text = yaml.safe_dump(cfg.to_document(), sort_keys=False, indent=2, allow_unicode=True)
    path.write_text(text, encoding="utf-8")
    log.info("Saved config: %s", path)

def load_config(config_path: Path, environment: Mapping[str, str]) -> Resolution:
    if not config_path.is_file():
        raise MissingDependencyError(f"Configuration file not found: {config_path}")
    log.info("Loading config: %s", config_path)
    return resolve(load_yaml(config_path), environment)

def sample_config() -> DayZConfig:
    """Starter document written by ``init``."""
    return DayZConfig(
        server=ServerSettings(name="My DayZ Server", admin_password="changeme123"),
        mods=[
            ModEntry(workshop_id="1559212036", name="@CF", client_required=True, server_side=False),
            ModEntry(workshop_id="1708571776", name="@VPPAdminTools", client_required=True, server_side=False),
        ],
        mod_configs={
            "vppAdminTools": {
                "superAdmins": ["76561198000000000"],
                "disablePassword": False,
                "password": "adminpassword",
                "passwordFormat": "plaintext",
            },
        },
        paths=PathsConfig(),
    )
