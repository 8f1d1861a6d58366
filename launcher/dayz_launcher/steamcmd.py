"""
steamcmd.py — SteamCMD management for the DayZ server and Workshop mods
-----------------------------------------------------------------------
Installs SteamCMD itself, installs/updates the dedicated server, downloads
Workshop items, links them into the server directory and copies their
signing keys.
"""

from __future__ import annotations
import os
import shutil
import subprocess
import tarfile
import urllib.request
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Protocol

from .errors import ExternalToolError, MissingDependencyError, SteamGuardRequiredError
from .fs_layout import Layout
from .models import SteamCredentials
from .settings import Settings
from .logging_setup import get_logger

log = get_logger("dayz.launcher.steamcmd")

STEAM_GUARD_EXIT_CODE = 5
KEY_SUFFIX = ".bikey"


class InstallStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    STEAM_GUARD_REQUIRED = "steam_guard_required"
    MISSING = "missing"


@dataclass(frozen=True)
class InstallResult:
    status: InstallStatus
    message: str
    exit_code: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.status is InstallStatus.SUCCESS

    @property
    def steam_guard_required(self) -> bool:
        return self.status is InstallStatus.STEAM_GUARD_REQUIRED

    def raise_for_status(self) -> None:
        if self.status is InstallStatus.SUCCESS:
            return
        if self.status is InstallStatus.STEAM_GUARD_REQUIRED:
            raise SteamGuardRequiredError(self.message, code=self.exit_code)
        if self.status is InstallStatus.MISSING:
            raise MissingDependencyError(self.message)
        raise ExternalToolError(self.message, code=self.exit_code)


class _NamedMod(Protocol):
    name: str
    server_side: bool


def shell_escape(value: str) -> str:
    """Single-quote ``value`` for a POSIX shell; embedded ' becomes '\\''."""
    return "'" + str(value).replace("'", "'\\''") + "'"


def build_mod_string(mods: Iterable[_NamedMod]) -> str:
    return ";".join(m.name for m in mods if not m.server_side)


def build_server_mod_string(mods: Iterable[_NamedMod]) -> str:
    return ";".join(m.name for m in mods if m.server_side)


def _result_for_exit_code(code: int, success_message: str, failure_prefix: str) -> InstallResult:
    if code == 0:
        return InstallResult(InstallStatus.SUCCESS, success_message, exit_code=0)
    if code == STEAM_GUARD_EXIT_CODE:
        return InstallResult(
            InstallStatus.STEAM_GUARD_REQUIRED,
            "Steam Guard code required. Check your email and set STEAM_GUARD_CODE.",
            exit_code=code,
        )
    return InstallResult(InstallStatus.FAILURE, f"{failure_prefix} failed with exit code {code}", exit_code=code)


class SteamCMD:
    def __init__(self, settings: Settings, layout: Layout):
        self.settings = settings
        self.layout = layout
        self.bin = layout.steamcmd_sh

    # ---------------------------------------------------------------------- #
    def _login_args(self, credentials: SteamCredentials, *, masked: bool = False) -> List[str]:
        if credentials.anonymous:
            return ["+login", "anonymous"]
        args = ["+login", shell_escape(credentials.username)]
        if credentials.password:
            args.append("<REDACTED_PW>" if masked else shell_escape(credentials.password))
        if credentials.steam_guard_code:
            args.append("<REDACTED_CODE>" if masked else shell_escape(credentials.steam_guard_code))
        return args

    def _command(self, credentials: Optional[SteamCredentials], install_dir: Optional[Path], *args: str,
                 masked: bool = False) -> str:
        parts = [shell_escape(str(self.bin))]
        # force_install_dir has to come before +login
        if install_dir is not None:
            parts += ["+force_install_dir", shell_escape(str(install_dir))]
        if credentials is not None:
            parts += self._login_args(credentials, masked=masked)
        parts += list(args)
        return " ".join(parts)

    def _run(self, command: str, display: str) -> int:
        log.info("SteamCMD: %s", display)
        proc = subprocess.run(["bash", "-c", command])
        log.debug("SteamCMD exited with code %s", proc.returncode)
        return proc.returncode

    # ---------------------------------------------------------------------- #
    def is_installed(self) -> bool:
        return self.bin.exists()

    def install(self) -> InstallResult:
        """Download SteamCMD, extract it and let it update itself once."""
        root = self.layout.steamcmd_root
        log.info("Installing SteamCMD into %s", root)
        try:
            root.mkdir(parents=True, exist_ok=True)
            archive = root / "steamcmd_linux.tar.gz"
            with urllib.request.urlopen(self.settings.steamcmd_url, timeout=60) as r:
                archive.write_bytes(r.read())
            with tarfile.open(archive, "r:gz") as tar:
                tar.extractall(path=str(root), filter="data")
            archive.unlink(missing_ok=True)
            if not self.bin.exists():
                return InstallResult(InstallStatus.FAILURE, f"steamcmd.sh not found after extraction in {root}")
            self.bin.chmod(0o755)

            log.info("Updating SteamCMD...")
            command = self._command(None, None, "+quit")
            rc = self._run(command, command)
        except (OSError, tarfile.TarError) as e:
            return InstallResult(InstallStatus.FAILURE, f"Failed to install SteamCMD: {e}")

        if rc != 0:
            return InstallResult(InstallStatus.FAILURE, f"SteamCMD self-update failed with exit code {rc}", exit_code=rc)
        return InstallResult(InstallStatus.SUCCESS, "SteamCMD installed successfully", exit_code=0)

    def install_server(self, credentials: SteamCredentials) -> InstallResult:
        log.info("Installing/updating DayZ server (app_id=%s) into %s, login: %s",
                 self.settings.server_app_id, self.layout.server_root, credentials.username or "anonymous")

        if not self.is_installed():
            return InstallResult(InstallStatus.MISSING, "SteamCMD is not installed. Run install-steamcmd first.")

        server_root = self.layout.server_root
        args = (
            "+app_update", str(self.settings.server_app_id),
            "validate",
            "+quit",
        )
        try:
            self.layout.server_root.mkdir(parents=True, exist_ok=True)
            rc = self._run(self._command(credentials, server_root, *args),
                           self._command(credentials, server_root, *args, masked=True))
        except OSError as e:
            return InstallResult(InstallStatus.FAILURE, f"Failed to install server: {e}")

        return _result_for_exit_code(rc, "DayZ server installed/updated successfully", "Installation")

    def install_mod(self, credentials: SteamCredentials, workshop_id: str, mod_name: str) -> InstallResult:
        log.info("Installing mod: %s (%s)", mod_name, workshop_id)

        if not self.is_installed():
            return InstallResult(InstallStatus.MISSING, "SteamCMD is not installed.")

        mods_root = self.layout.mods_root
        args = (
            "+workshop_download_item", str(self.settings.workshop_app_id), shell_escape(workshop_id),
            "+quit",
        )
        try:
            self.layout.mods_root.mkdir(parents=True, exist_ok=True)
            rc = self._run(self._command(credentials, mods_root, *args),
                           self._command(credentials, mods_root, *args, masked=True))
        except OSError as e:
            return InstallResult(InstallStatus.FAILURE, f"Failed to install mod {mod_name}: {e}")

        result = _result_for_exit_code(rc, f"Mod {mod_name} installed successfully", "Mod installation")
        if not result.success:
            return result

        src = self.layout.workshop_content(self.settings.workshop_app_id) / str(workshop_id)
        if not src.is_dir():
            log.warning("Workshop content not found after download: %s", src)
            return InstallResult(InstallStatus.FAILURE, f"Workshop content for {mod_name} not found at {src}", exit_code=0)
        try:
            self._link_mod(src, self.layout.mod_link(mod_name))
        except OSError as e:
            return InstallResult(InstallStatus.FAILURE, f"Failed to link mod {mod_name}: {e}", exit_code=0)
        return result

    def _link_mod(self, src: Path, dst: Path) -> None:
        dst.parent.mkdir(parents=True, exist_ok=True)
        if dst.is_symlink() or dst.is_file():
            dst.unlink()
        elif dst.is_dir():
            shutil.rmtree(dst)
        os.symlink(src, dst, target_is_directory=True)
        log.info("Linked %s -> %s", dst, src)

    # ---------------------------------------------------------------------- #
    def copy_mod_keys(self, mod_name: str) -> List[Path]:
        """Copies all .bikey files of an installed mod to the server's keys folder."""
        mod_path = self.layout.mod_link(mod_name)
        source = None
        for candidate in ("keys", "Keys"):
            if (mod_path / candidate).is_dir():
                source = mod_path / candidate
                break

        if source is None:
            log.warning("No keys folder found for %s", mod_name)
            return []

        dest = self.layout.keys_dir
        dest.mkdir(parents=True, exist_ok=True)
        copied = []
        for key_file in sorted(source.iterdir()):
            if key_file.is_file() and key_file.suffix.lower() == KEY_SUFFIX:
                target = dest / key_file.name
                shutil.copy2(key_file, target)
                copied.append(target)
                log.info("Copied key: %s", key_file.name)
        return copied
