"""
Configuration resolution: defaults + YAML document + environment.

All merge and validation logic lives here so it can be tested without
touching the filesystem. Nothing in this module raises for bad input;
problems are returned as a list of human-readable messages.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from .models import DayZConfig, SteamCredentials
from .logging_setup import get_logger

log = get_logger("dayz.launcher.resolver")

ENV_STEAM_USERNAME = "STEAM_USERNAME"
ENV_STEAM_PASSWORD = "STEAM_PASSWORD"
ENV_STEAM_GUARD_CODE = "STEAM_GUARD_CODE"

# env var -> key in the optional ``steam:`` block
_CREDENTIAL_ENV = {
    ENV_STEAM_USERNAME: "username",
    ENV_STEAM_PASSWORD: "password",
    ENV_STEAM_GUARD_CODE: "steamGuardCode",
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "server": {
        "name": "DayZ Server",
        "password": "",
        "adminPassword": "changeme",
        "maxPlayers": 60,
        "port": 2302,
        "steamQueryPort": 27016,
        "battleEye": True,
        "verifySignatures": 2,
        "persistent": True,
        "mission": "dayzOffline.chernarusplus",
    },
    "mods": [],
    "modConfigs": {},
    "paths": {
        "steamcmd": "/opt/steamcmd",
        "serverInstall": "/opt/dayz-server",
        "profiles": "/opt/dayz-server/profiles",
        "mods": "/opt/dayz-server/mods",
    },
    "steam": {
        "username": "",
        "password": "",
        "steamGuardCode": "",
    },
}


@dataclass(frozen=True)
class Resolution:
    config: Optional[DayZConfig]
    credentials: SteamCredentials
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.config is not None and not self.errors


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge ``override`` over ``base`` and return a new dict.

    Nested mappings are merged key by key, everything else (lists included)
    is replaced. ``None`` in the override means "keep the base value".
    """
    result = deepcopy(dict(base))
    for key, value in override.items():
        if value is None:
            continue
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = deepcopy(value)
    return result


def overlay_credentials(steam_block: Mapping[str, Any], environment: Mapping[str, str]) -> SteamCredentials:
    """Non-empty environment values always win over the document."""
    merged = {k: str(v) for k, v in steam_block.items() if v is not None}
    for env_key, field_key in _CREDENTIAL_ENV.items():
        value = environment.get(env_key)
        if value:
            merged[field_key] = value
    return SteamCredentials.model_validate(merged)


def validate_config(cfg: DayZConfig) -> List[str]:
    errors: List[str] = []
    s = cfg.server

    if not s.name:
        errors.append("Server name is required")
    if not s.admin_password:
        errors.append("Admin password is required")
    if s.port < 1 or s.port > 65535:
        errors.append("Server port must be between 1 and 65535")
    if s.max_players < 1 or s.max_players > 127:
        errors.append("Max players must be between 1 and 127")

    for mod in cfg.mods:
        if not mod.workshop_id:
            errors.append(f'Mod "{mod.name}" is missing workshopId')
        if not mod.name:
            errors.append(f'Mod with workshopId "{mod.workshop_id}" is missing name')

    return errors


def _format_pydantic_errors(exc: ValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return messages


def resolve(raw_document: Optional[Mapping[str, Any]], environment: Mapping[str, str]) -> Resolution:
    """
    Build the run's configuration from a raw YAML document and an environment
    mapping (normally ``os.environ``).
    """
    raw = dict(raw_document or {})
    merged = deep_merge(DEFAULT_CONFIG, raw)

    steam_block = merged.pop("steam", {}) or {}
    if not isinstance(steam_block, Mapping):
        steam_block = {}
    try:
        credentials = overlay_credentials(steam_block, environment)
    except ValidationError as e:
        return Resolution(config=None, credentials=SteamCredentials(),
                          errors=[f"steam.{m}" for m in _format_pydantic_errors(e)])

    try:
        cfg = DayZConfig.model_validate(merged)
    except ValidationError as e:
        errors = _format_pydantic_errors(e)
        log.debug("Config document rejected: %s", errors)
        return Resolution(config=None, credentials=credentials, errors=errors)

    errors = validate_config(cfg)
    if errors:
        log.debug("Config failed validation: %s", errors)
    return Resolution(config=cfg, credentials=credentials, errors=errors)
