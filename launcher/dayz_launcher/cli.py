from __future__ import annotations
import argparse
import os
import subprocess
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional
import uvicorn
from .settings import Settings
from .logging_setup import setup_logging, get_logger
from .config_loader import load_config, save_config, sample_config
from .errors import ConfigValidationError, LauncherError, MissingDependencyError, SteamGuardRequiredError
from .fs_layout import build_layout
from .models import DayZConfig
from .mods import BatchResult
from .orchestrator import Orchestrator
from .resolver import Resolution
from .steamcmd import SteamCMD
from .api import create_app
from . import console

log = get_logger("dayz.launcher.cli")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dayz-launcher",
                                     description="Install, configure and run a DayZ dedicated server")
    sub = parser.add_subparsers(dest="cmd")

    init_p = sub.add_parser("init", help="Create a sample configuration file")
    init_p.add_argument("-o", "--output", type=Path, default=settings.config_file,
                        help="Output path for the configuration")

    sub.add_parser("validate", help="Validate the configuration file")
    sub.add_parser("install", help="Full installation (SteamCMD, server, mods, config)")
    sub.add_parser("install-steamcmd", help="Install SteamCMD only")
    sub.add_parser("install-server", help="Install/update the DayZ server")
    sub.add_parser("install-mods", help="Install/update all configured mods")
    sub.add_parser("configure", help="Generate server config and configure mods")
    sub.add_parser("generate-config", help="Generate serverDZ.cfg and the startup script")
    sub.add_parser("configure-mods", help="Configure all installed mods")
    sub.add_parser("update", help="Update server and mods")
    sub.add_parser("start", help="Start the server (default)")
    sub.add_parser("shell", help="Start an interactive bash shell")
    sub.add_parser("help", help="Show this help message")

    api_p = sub.add_parser("api", help="Run the read-only status API (FastAPI)")
    api_p.add_argument("--host", default="0.0.0.0")
    api_p.add_argument("--port", type=int, default=8000)
    return parser


class _Commands:
    def __init__(self, settings: Settings, environment: Mapping[str, str]):
        self.settings = settings
        self.environment = environment

    def _resolve(self) -> Resolution:
        res = load_config(self.settings.config_file, self.environment)
        if not res.ok:
            raise ConfigValidationError(res.errors)
        return res

    def _orchestrator(self) -> Orchestrator:
        res = self._resolve()
        return Orchestrator(self.settings, res.config, res.credentials)

    def _report_batch(self, batch: BatchResult) -> int:
        if batch.ok:
            console.success(batch.summary())
            return 0
        console.error(batch.summary())
        if batch.steam_guard_required:
            console.steam_guard_instructions()
        return 1

    # ---------------------------------------------------------------------- #
    def init(self, output: Path) -> int:
        if output.exists():
            console.warn(f"Configuration already exists at {output}")
            return 0
        save_config(sample_config(), output)
        console.success(f"Configuration created at {output}")
        console.warn("Please edit the configuration and restart the container")
        return 0

    def validate(self) -> int:
        console.info("Validating configuration...")
        res = load_config(self.settings.config_file, self.environment)
        if not res.ok:
            console.validation_errors(res.errors)
            return 1
        s = res.config.server
        console.success("Configuration is valid")
        console.info(f"Server: {s.name}")
        console.info(f"  Port: {s.port}")
        console.info(f"  Max Players: {s.max_players}")
        console.info(f"  Mods: {len(res.config.mods)}")
        return 0

    def install(self) -> int:
        if not self.settings.config_file.exists():
            console.warn("No configuration found. Creating default...")
            self.init(self.settings.config_file)
            return 1
        orch = self._orchestrator()
        console.info(f"Starting full installation of {orch.config.server.name} "
                     f"({len(orch.config.mods)} mods)")
        batch = orch.install()
        rc = self._report_batch(batch)
        if rc == 0:
            console.success("Installation complete!")
        return rc

    def install_steamcmd(self) -> int:
        if self.settings.config_file.exists():
            cfg = self._resolve().config
        else:
            cfg = DayZConfig()
        steamcmd = SteamCMD(self.settings, build_layout(cfg.paths))
        if steamcmd.is_installed():
            console.warn("SteamCMD is already installed")
            return 0
        console.info("Installing SteamCMD...")
        result = steamcmd.install()
        result.raise_for_status()
        console.success(result.message)
        return 0

    def install_server(self) -> int:
        orch = self._orchestrator()
        orch.prepare_environment()
        orch.ensure_steamcmd()
        console.info("Installing DayZ server...")
        result = orch.install_server()
        console.success(result.message)
        return 0

    def install_mods(self) -> int:
        orch = self._orchestrator()
        console.info("Installing mods...")
        return self._report_batch(orch.install_mods())

    def configure(self) -> int:
        self.generate_config()
        self.configure_mods()
        console.success("Configuration complete")
        return 0

    def generate_config(self) -> int:
        cfg_path, script = self._orchestrator().generate_configs()
        console.success(f"Generated {cfg_path} and {script}")
        return 0

    def configure_mods(self) -> int:
        configured = self._orchestrator().configure_mods()
        console.success(f"Configured mods: {', '.join(configured) or 'none'}")
        return 0

    def update(self) -> int:
        console.info("Updating server and mods...")
        rc = self._report_batch(self._orchestrator().update())
        if rc == 0:
            console.success("Update complete")
        return rc

    def start(self) -> int:
        if not self.settings.config_file.exists():
            raise MissingDependencyError(f"Configuration file not found: {self.settings.config_file}. "
                                         "Run init first.")
        return self._orchestrator().start()

    def shell(self) -> int:
        console.info("Starting interactive shell...")
        return subprocess.call(["/bin/bash"])

    def api(self, host: str, port: int) -> int:
        app = create_app(self.settings, dict(self.environment))
        uvicorn.run(app, host=host, port=port, log_level=self.settings.log_level.lower())
        return 0


def main(argv=None, environment: Optional[Mapping[str, str]] = None) -> int:
    settings = Settings()
    setup_logging(settings)
    parser = build_parser(settings)
    args = parser.parse_args(argv)
    cmd = args.cmd or "start"
    log.debug("Command: %s", cmd)

    if cmd == "help":
        parser.print_help()
        return 0

    console.banner()
    commands = _Commands(settings, os.environ if environment is None else environment)
    dispatch: Dict[str, Callable[[], int]] = {
        "init": lambda: commands.init(args.output),
        "validate": commands.validate,
        "install": commands.install,
        "install-steamcmd": commands.install_steamcmd,
        "install-server": commands.install_server,
        "install-mods": commands.install_mods,
        "configure": commands.configure,
        "generate-config": commands.generate_config,
        "configure-mods": commands.configure_mods,
        "update": commands.update,
        "start": commands.start,
        "shell": commands.shell,
        "api": lambda: commands.api(args.host, args.port),
    }

    try:
        return dispatch[cmd]()
    except ConfigValidationError as e:
        console.validation_errors(e.errors)
    except SteamGuardRequiredError as e:
        console.error(str(e))
        console.steam_guard_instructions()
    except LauncherError as e:
        console.error(str(e))
    except ValueError as e:
        console.error(f"Failed to load config: {e}")
    return 1
