"""
Configurator for VPP Admin Tools.

Writes the super-admin list and the credentials file below the profiles
directory and, when the password prompt is disabled, sets
``vppDisablePassword`` in serverDZ.cfg.
"""
from __future__ import annotations
import hashlib
import re
from pathlib import Path
from pydantic import ValidationError
from .base import ModConfigurator
from ...models import VPPAdminToolsConfig
from ...logging_setup import get_logger

log = get_logger("dayz.launcher.mods.vpp")

DISABLE_PASSWORD_FLAG = "vppDisablePassword"
_FLAG_RE = re.compile(rf"{DISABLE_PASSWORD_FLAG}\s*=\s*\d+\s*;")


class VPPAdminToolsConfigurator(ModConfigurator):
    mod_name = "@VPPAdminTools"
    aliases = ("@vppAdminTools", "VPPAdminTools")
    config_key = "vppAdminTools"

    def configure(self) -> bool:
        raw = self.mod_settings()
        if raw is None:
            log.info("No VPPAdminTools configuration found, skipping.")
            return False
        try:
            cfg = VPPAdminToolsConfig.model_validate(raw)
        except ValidationError as e:
            log.error("Invalid VPPAdminTools configuration, skipping: %s", e)
            return False

        log.info("Configuring VPP Admin Tools...")
        permissions = self.profiles_path / "VPPAdminTools" / "Permissions"
        super_admins = permissions / "SuperAdmins"
        self.ensure_dir(super_admins)

        self._write_super_admins(super_admins / "SuperAdmins.txt", cfg)
        self._write_credentials(permissions / "credentials.txt", cfg)

        if cfg.disable_password:
            self._patch_server_cfg(cfg)

        log.info("VPP Admin Tools configured.")
        return True

    def _write_super_admins(self, path: Path, cfg: VPPAdminToolsConfig) -> None:
        self.write_file(path, "".join(f"{admin_id}\n" for admin_id in cfg.super_admins))

    def _write_credentials(self, path: Path, cfg: VPPAdminToolsConfig) -> None:
        if cfg.disable_password:
            self.write_file(path, "")
            return
        if not cfg.password:
            log.warning("No password set for VPPAdminTools, credentials file left untouched.")
            return

        if cfg.password_format == "sha256":
            content = hashlib.sha256(cfg.password.encode("utf-8")).hexdigest()
        else:
            # VPPAdminTools hashes a plaintext password itself on first start
            content = cfg.password
        log.info("Writing VPPAdminTools credentials (format=%s)", cfg.password_format)
        self.write_file(path, content)

    def _patch_server_cfg(self, cfg: VPPAdminToolsConfig) -> None:
        cfg_path = self.layout.server_cfg
        content = self.read_file(cfg_path)
        if content is None:
            log.warning("%s not found, %s not set. Run generate-config first.", cfg_path, DISABLE_PASSWORD_FLAG)
            return

        value = 1 if cfg.disable_password else 0
        line = f"{DISABLE_PASSWORD_FLAG} = {value};"
        if _FLAG_RE.search(content):
            content = _FLAG_RE.sub(line, content, count=1)
        else:
            if content and not content.endswith("\n"):
                content += "\n"
            content += f"\n// VPP Admin Tools - Disable password requirement\n{line}\n"
        self.write_file(cfg_path, content)
