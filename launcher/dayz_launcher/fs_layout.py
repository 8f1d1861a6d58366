from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from .models import PathsConfig

SERVER_BINARY_NAME = "DayZServer"
SERVER_CFG_NAME = "serverDZ.cfg"
START_SCRIPT_NAME = "start-server.sh"

@dataclass(frozen=True)
class Layout:
    steamcmd_root: Path
    steamcmd_sh: Path
    server_root: Path
    server_binary: Path
    server_cfg: Path
    start_script: Path
    keys_dir: Path
    profiles: Path
    mods_root: Path

    def workshop_content(self, workshop_app_id: int) -> Path:
        return self.mods_root / "steamapps" / "workshop" / "content" / str(workshop_app_id)

    def mod_link(self, mod_name: str) -> Path:
        return self.server_root / mod_name

def build_layout(paths: PathsConfig) -> Layout:
    steamcmd = Path(paths.steamcmd)
    server = Path(paths.server_install)
    return Layout(
        steamcmd_root=steamcmd,
        steamcmd_sh=steamcmd / "steamcmd.sh",
        server_root=server,
        server_binary=server / SERVER_BINARY_NAME,
        server_cfg=server / SERVER_CFG_NAME,
        start_script=server / START_SCRIPT_NAME,
        keys_dir=server / "keys",
        profiles=Path(paths.profiles),
        mods_root=Path(paths.mods),
    )

def ensure_dirs(layout: Layout) -> None:
    for p in [
        layout.steamcmd_root,
        layout.server_root,
        layout.keys_dir,
        layout.profiles,
        layout.mods_root,
    ]:
        p.mkdir(parents=True, exist_ok=True)
