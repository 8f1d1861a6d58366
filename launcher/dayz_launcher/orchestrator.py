from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from .settings import Settings
from .models import DayZConfig, SteamCredentials
from .logging_setup import get_logger
from .fs_layout import build_layout, ensure_dirs
from .steamcmd import InstallResult, InstallStatus, SteamCMD
from .mods import BatchResult, ModManager
from .cfg_generator import write_configs
from .supervisor import ServerSupervisor
from .errors import MissingDependencyError

log = get_logger("dayz.launcher.orch")

class Orchestrator:
    def __init__(self, settings: Settings, config: DayZConfig, credentials: Optional[SteamCredentials],
                 steamcmd: Optional[SteamCMD] = None):
        self.settings = settings
        self.config = config
        self.credentials = credentials
        self.layout = build_layout(config.paths)
        self.steamcmd = steamcmd or SteamCMD(settings, self.layout)
        self.mods = ModManager(config, self.steamcmd, credentials, self.layout)

    def prepare_environment(self) -> None:
        ensure_dirs(self.layout)

    def ensure_steamcmd(self) -> InstallResult:
        if self.steamcmd.is_installed():
            log.info("SteamCMD already installed at %s", self.layout.steamcmd_sh)
            return InstallResult(InstallStatus.SUCCESS, "SteamCMD already installed")
        log.info("SteamCMD not found, installing first.")
        result = self.steamcmd.install()
        result.raise_for_status()
        return result

    def install_server(self) -> InstallResult:
        creds = self.credentials or SteamCredentials()
        result = self.steamcmd.install_server(creds)
        result.raise_for_status()
        log.info(result.message)
        return result

    def install_mods(self) -> BatchResult:
        return self.mods.install_all()

    def generate_configs(self) -> Tuple[Path, Path]:
        return write_configs(self.config, self.layout)

    def configure_mods(self) -> List[str]:
        return self.mods.configure_all()

    def install(self) -> BatchResult:
        """
        Full installation: SteamCMD, server, mods, server config, mod config.
        Stops at the first SteamCMD or server failure; mod failures are
        collected in the returned BatchResult.
        """
        s = self.config.server
        log.info("Full installation for %r (%d mods)", s.name, len(self.config.mods))

        self.prepare_environment()
        log.info("Step 1/5: SteamCMD")
        self.ensure_steamcmd()
        log.info("Step 2/5: DayZ server")
        self.install_server()
        log.info("Step 3/5: mods")
        batch = self.install_mods()
        log.info("Step 4/5: server config")
        self.generate_configs()
        # second pass: configurators may patch the generated serverDZ.cfg
        log.info("Step 5/5: mod configuration")
        self.configure_mods()
        return batch

    def update(self) -> BatchResult:
        self.install_server()
        return self.install_mods()

    def start(self, *, auto_install: bool = True) -> int:
        if not self.layout.server_binary.exists():
            if not auto_install:
                raise MissingDependencyError(f"Server binary not found: {self.layout.server_binary}")
            log.warning("Server not installed. Running first-time setup...")
            self.install()

        if not self.layout.start_script.exists():
            log.warning("Startup script not found. Running configuration...")
            self.generate_configs()
            self.configure_mods()

        log.info("Starting DayZ server: %s", self.config.server.name)
        supervisor = ServerSupervisor(self.layout.start_script, self.layout.server_root,
                                      grace_seconds=self.settings.shutdown_grace_seconds)
        return supervisor.run()

    def status(self) -> Dict[str, Any]:
        mods = []
        for m in self.config.mods:
            link = self.layout.mod_link(m.name)
            mods.append({
                "name": m.name,
                "workshopId": m.workshop_id,
                "serverSide": m.server_side,
                "installed": link.exists(),
            })
        return {
            "steamcmd_installed": self.steamcmd.is_installed(),
            "server_installed": self.layout.server_binary.exists(),
            "server_cfg": self.layout.server_cfg.exists(),
            "start_script": self.layout.start_script.exists(),
            "mods": mods,
        }
