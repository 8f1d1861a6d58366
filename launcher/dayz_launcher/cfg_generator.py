from __future__ import annotations
from pathlib import Path
from string import Template
from typing import Tuple
from .fs_layout import Layout
from .models import DayZConfig
from .steamcmd import build_mod_string, build_server_mod_string
from .logging_setup import get_logger

log = get_logger("dayz.launcher.cfg")

START_SCRIPT = Template("""#!/bin/bash
# Generated by dayz-launcher. Changes are overwritten by generate-config.
cd $server_dir || exit 1
exec ./$binary \\
  -config=$config_name \\
  -port=$port \\
  -profiles=$profiles \\
  "-mod=$mods" \\
  "-serverMod=$server_mods" \\
  -dologs -adminlog -netlog -freezecheck
""")


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _shell_dq(value: str) -> str:
    """Escape for use inside a double-quoted bash string."""
    for ch in ("\\", '"', "$", "`"):
        value = value.replace(ch, "\\" + ch)
    return value


def _flag(value: bool) -> int:
    return 1 if value else 0


def generate_server_cfg(cfg: DayZConfig, out_path: Path) -> None:
    s = cfg.server
    lines = [
        f'hostname = "{_quote(s.name)}";',
        f'password = "{_quote(s.password)}";',
        f'passwordAdmin = "{_quote(s.admin_password)}";',
        f"maxPlayers = {s.max_players};",
        f"verifySignatures = {s.verify_signatures};",
        f"BattlEye = {_flag(s.battle_eye)};",
        f"steamQueryPort = {s.steam_query_port};",
        "storageAutoFix = 1;",
        "instanceId = 1;",
        # persistence off: house and door states are not stored between restarts
        f"storeHouseStateDisabled = {_flag(not s.persistent)};",
    ]
    if s.disable_third_person is not None:
        lines.append(f"disable3rdPerson = {_flag(s.disable_third_person)};")
    if s.disable_crosshair is not None:
        lines.append(f"disableCrosshair = {_flag(s.disable_crosshair)};")
    if s.time_acceleration is not None:
        lines.append(f"serverTimeAcceleration = {s.time_acceleration:g};")
    if s.night_time_acceleration is not None:
        lines.append(f"serverNightTimeAcceleration = {s.night_time_acceleration:g};")
    if s.motd:
        motd = ", ".join(f'"{_quote(m)}"' for m in s.motd)
        lines.append(f"motd[] = {{ {motd} }};")
        lines.append(f"motdInterval = {s.motd_interval};")

    lines += [
        "",
        "class Missions",
        "{",
        "    class DayZ",
        "    {",
        f'        template = "{_quote(s.mission)}";',
        "    };",
        "};",
    ]

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    log.info("Generated server cfg: %s", out_path)


def generate_start_script(cfg: DayZConfig, layout: Layout, out_path: Path) -> None:
    script = START_SCRIPT.substitute(
        server_dir=f'"{_shell_dq(str(layout.server_root))}"',
        binary=layout.server_binary.name,
        config_name=layout.server_cfg.name,
        port=cfg.server.port,
        profiles=f'"{_shell_dq(str(layout.profiles))}"',
        mods=_shell_dq(build_mod_string(cfg.mods)),
        server_mods=_shell_dq(build_server_mod_string(cfg.mods)),
    )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(script, encoding="utf-8")
    out_path.chmod(0o755)
    log.info("Generated start script: %s", out_path)


def write_configs(cfg: DayZConfig, layout: Layout) -> Tuple[Path, Path]:
    layout.profiles.mkdir(parents=True, exist_ok=True)
    generate_server_cfg(cfg, layout.server_cfg)
    generate_start_script(cfg, layout, layout.start_script)
    return layout.server_cfg, layout.start_script
