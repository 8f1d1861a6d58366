"""
manager.py — Workshop mod installation and configuration
---------------------------------------------------------
Installs every configured mod through SteamCMD, copies its keys into the
server's keys folder and dispatches to the per-mod configurators.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import MissingCredentialsError
from ..fs_layout import Layout, build_layout
from ..models import DayZConfig, ModEntry, SteamCredentials
from ..steamcmd import InstallResult, SteamCMD, build_mod_string, build_server_mod_string
from ..logging_setup import get_logger
from .configurators import ModConfigurator, normalize_mod_name, registry_keys

log = get_logger("dayz.launcher.mods")


@dataclass(frozen=True)
class ModInstallOutcome:
    mod: ModEntry
    result: InstallResult
    keys: List[Path] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.result.success


@dataclass
class BatchResult:
    outcomes: List[ModInstallOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[ModInstallOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> List[ModInstallOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def steam_guard_required(self) -> bool:
        return any(o.result.steam_guard_required for o in self.outcomes)

    def summary(self) -> str:
        total = len(self.outcomes)
        if self.ok:
            return f"All {total} mods installed"
        return f"{len(self.failed)} of {total} mods failed: " + ", ".join(o.mod.name for o in self.failed)


@dataclass(frozen=True)
class StartupParams:
    mods: str
    server_mods: str


class ModManager:
    def __init__(self, config: DayZConfig, steamcmd: SteamCMD, credentials: Optional[SteamCredentials] = None,
                 layout: Optional[Layout] = None):
        self.config = config
        self.credentials = credentials
        self.steamcmd = steamcmd
        self.layout = layout or build_layout(config.paths)
        self.configurators: Dict[str, ModConfigurator] = {}
        self._register_configurators()

    def _register_configurators(self) -> None:
        instances: Dict[type, ModConfigurator] = {}
        for key, cls in registry_keys().items():
            if cls not in instances:
                instances[cls] = cls(self.config, self.layout)
            self.configurators[key] = instances[cls]

    # ---------------------------------------------------------------------- #
    def install_all(self) -> BatchResult:
        if self.credentials is None:
            raise MissingCredentialsError("Steam credentials required for mod installation")

        log.info("Installing %d configured mods...", len(self.config.mods))
        batch = BatchResult()
        for mod in self.config.mods:
            batch.outcomes.append(self.install_mod(mod))

        if batch.ok:
            log.info(batch.summary())
        else:
            log.warning(batch.summary())
        return batch

    def install_mod(self, mod: ModEntry) -> ModInstallOutcome:
        if self.credentials is None:
            raise MissingCredentialsError("Steam credentials required for mod installation")

        result = self.steamcmd.install_mod(self.credentials, mod.workshop_id, mod.name)
        if not result.success:
            log.error("Failed to install %s: %s", mod.name, result.message)
            if result.steam_guard_required:
                log.error("Set the STEAM_GUARD_CODE environment variable and try again.")
            return ModInstallOutcome(mod=mod, result=result)

        keys = self.steamcmd.copy_mod_keys(mod.name)
        return ModInstallOutcome(mod=mod, result=result, keys=keys)

    # ---------------------------------------------------------------------- #
    def configure_all(self) -> List[str]:
        log.info("Configuring mods...")
        configured = []
        for mod in self.config.mods:
            if self.configure_mod(mod.name):
                configured.append(mod.name)
        return configured

    def configure_mod(self, mod_name: str) -> bool:
        configurator = self.configurators.get(normalize_mod_name(mod_name))
        if configurator is None:
            log.info("No configurator found for %s, skipping custom configuration", mod_name)
            return False
        log.info("Configuring %s...", mod_name)
        return configurator.configure()

    # ---------------------------------------------------------------------- #
    def startup_params(self) -> StartupParams:
        return StartupParams(
            mods=build_mod_string(self.config.mods),
            server_mods=build_server_mod_string(self.config.mods),
        )

    def registered_names(self) -> List[str]:
        names = []
        for configurator in dict.fromkeys(self.configurators.values()):
            names += [configurator.mod_name, *configurator.aliases]
        return names
