from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from ...fs_layout import Layout, build_layout
from ...models import DayZConfig
from ...logging_setup import get_logger

log = get_logger("dayz.launcher.mods.configure")


def normalize_mod_name(name: str) -> str:
    """'@VPPAdminTools', '@vppAdminTools' and 'VPPAdminTools' all become 'vppadmintools'."""
    return name.strip().lstrip("@").lower()


class ModConfigurator(ABC):
    """
    Writes the settings of a single mod.

    ``mod_name`` is the canonical folder name; ``aliases`` are further
    spellings users put into the mod list that map to the same handler.
    ``config_key`` is the entry under ``modConfigs`` this handler reads.
    """

    mod_name: str = ""
    aliases: Tuple[str, ...] = ()
    config_key: str = ""

    def __init__(self, config: DayZConfig, layout: Optional[Layout] = None):
        self.config = config
        self.layout = layout or build_layout(config.paths)

    @property
    def server_path(self) -> Path:
        return self.layout.server_root

    @property
    def profiles_path(self) -> Path:
        return self.layout.profiles

    def mod_settings(self) -> Optional[Dict[str, Any]]:
        """``modConfigs.<config_key>``, falling back to the mod entry's own ``config``."""
        block = self.config.mod_configs.get(self.config_key)
        if block is not None:
            return block
        names = {normalize_mod_name(n) for n in (self.mod_name, *self.aliases)}
        for mod in self.config.mods:
            if normalize_mod_name(mod.name) in names and mod.config is not None:
                return mod.config
        return None

    @abstractmethod
    def configure(self) -> bool:
        """Returns True when something was written."""

    def ensure_dir(self, dir_path: Path) -> None:
        dir_path.mkdir(parents=True, exist_ok=True)

    def write_file(self, file_path: Path, content: str) -> None:
        self.ensure_dir(file_path.parent)
        file_path.write_text(content, encoding="utf-8")
        log.info("Written: %s", file_path)

    def read_file(self, file_path: Path) -> Optional[str]:
        if not file_path.is_file():
            return None
        return file_path.read_text(encoding="utf-8")
