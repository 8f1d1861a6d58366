from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class _CamelModel(BaseModel):
    # YAML keys are camelCase, attributes snake_case
    model_config = ConfigDict(populate_by_name=True)


class ServerSettings(_CamelModel):
    name: str = "DayZ Server"
    password: str = ""
    admin_password: str = Field(default="changeme", alias="adminPassword")
    max_players: int = Field(default=60, alias="maxPlayers")
    port: int = 2302
    steam_query_port: int = Field(default=27016, alias="steamQueryPort")
    battle_eye: bool = Field(default=True, alias="battleEye")
    verify_signatures: int = Field(default=2, alias="verifySignatures", description="0=disabled, 1=low, 2=high")
    persistent: bool = True
    mission: str = "dayzOffline.chernarusplus"
    motd: List[str] = Field(default_factory=list)
    motd_interval: int = Field(default=60, alias="motdInterval")
    time_acceleration: Optional[float] = Field(default=None, alias="timeAcceleration")
    night_time_acceleration: Optional[float] = Field(default=None, alias="nightTimeAcceleration")
    disable_third_person: Optional[bool] = Field(default=None, alias="disableThirdPerson")
    disable_crosshair: Optional[bool] = Field(default=None, alias="disableCrosshair")


class ModEntry(_CamelModel):
    workshop_id: str = Field(default="", alias="workshopId", description="Steam Workshop ID")
    name: str = Field(default="", description="Folder name the mod is linked under, usually starts with @")
    client_required: bool = Field(default=True, alias="clientRequired")
    server_side: bool = Field(default=False, alias="serverSide")
    config: Optional[Dict[str, Any]] = None

    @field_validator("workshop_id", mode="before")
    @classmethod
    def _id_as_string(cls, v: Any) -> Any:
        # unquoted YAML ids arrive as int
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class WebhooksConfig(_CamelModel):
    discord: Optional[str] = None


class VPPAdminToolsConfig(_CamelModel):
    super_admins: List[str] = Field(default_factory=list, alias="superAdmins")
    password: Optional[str] = None
    disable_password: bool = Field(default=False, alias="disablePassword")
    # plaintext: the mod hashes it on first launch; sha256: pre-hashed hex digest
    password_format: Literal["plaintext", "sha256"] = Field(default="plaintext", alias="passwordFormat")
    webhooks: Optional[WebhooksConfig] = None

    @field_validator("super_admins", mode="before")
    @classmethod
    def _ids_as_strings(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [str(x) if isinstance(x, int) and not isinstance(x, bool) else x for x in v]
        return v


class PathsConfig(_CamelModel):
    steamcmd: str = "/opt/steamcmd"
    server_install: str = Field(default="/opt/dayz-server", alias="serverInstall")
    profiles: str = "/opt/dayz-server/profiles"
    mods: str = "/opt/dayz-server/mods"


class SteamCredentials(_CamelModel):
    """Never part of DayZConfig, so it is never written back to the YAML file."""
    username: str = ""
    password: str = ""
    steam_guard_code: str = Field(default="", alias="steamGuardCode")

    @property
    def anonymous(self) -> bool:
        return not self.username


class DayZConfig(_CamelModel):
    server: ServerSettings = Field(default_factory=ServerSettings)
    mods: List[ModEntry] = Field(default_factory=list)
    mod_configs: Dict[str, Any] = Field(default_factory=dict, alias="modConfigs")
    paths: PathsConfig = Field(default_factory=PathsConfig)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
