"""
Tests for serverDZ.cfg and start script generation.
"""

import os
import shlex

from dayz_launcher.cfg_generator import generate_server_cfg, write_configs
from dayz_launcher.models import DayZConfig, ServerSettings


def test_server_cfg_core_values(tmp_path):
    cfg = DayZConfig(server=ServerSettings(name="My Server", password="join", admin_password="adm",
                                           max_players=40, verify_signatures=2, battle_eye=False))
    out = tmp_path / "serverDZ.cfg"
    generate_server_cfg(cfg, out)
    text = out.read_text(encoding="utf-8")

    assert 'hostname = "My Server";' in text
    assert 'password = "join";' in text
    assert 'passwordAdmin = "adm";' in text
    assert "maxPlayers = 40;" in text
    assert "verifySignatures = 2;" in text
    assert "BattlEye = 0;" in text
    assert "steamQueryPort = 27016;" in text
    assert "storeHouseStateDisabled = 0;" in text
    assert 'template = "dayzOffline.chernarusplus";' in text


def test_optional_values_only_when_set(tmp_path):
    out = tmp_path / "serverDZ.cfg"
    generate_server_cfg(DayZConfig(), out)
    text = out.read_text(encoding="utf-8")
    for key in ("disable3rdPerson", "disableCrosshair", "serverTimeAcceleration", "motd[]"):
        assert key not in text

    cfg = DayZConfig(server=ServerSettings(disable_third_person=True, time_acceleration=6,
                                           night_time_acceleration=0.5, motd=["Welcome", "Be nice"],
                                           persistent=False))
    generate_server_cfg(cfg, out)
    text = out.read_text(encoding="utf-8")
    assert "disable3rdPerson = 1;" in text
    assert "serverTimeAcceleration = 6;" in text
    assert "serverNightTimeAcceleration = 0.5;" in text
    assert 'motd[] = { "Welcome", "Be nice" };' in text
    assert "motdInterval = 60;" in text
    assert "storeHouseStateDisabled = 1;" in text


def test_quotes_in_hostname_are_escaped(tmp_path):
    out = tmp_path / "serverDZ.cfg"
    generate_server_cfg(DayZConfig(server=ServerSettings(name='The "Best" Server')), out)
    assert 'hostname = "The \\"Best\\" Server";' in out.read_text(encoding="utf-8")


def test_start_script(config, layout):
    cfg_path, script = write_configs(config, layout)

    assert cfg_path == layout.server_cfg and cfg_path.is_file()
    assert os.access(script, os.X_OK)
    tokens = shlex.split(script.read_text(encoding="utf-8"), comments=True)
    assert "./DayZServer" in tokens
    assert "-config=serverDZ.cfg" in tokens
    assert "-port=2302" in tokens
    assert f"-profiles={layout.profiles}" in tokens
    assert "-mod=@CF;@VPPAdminTools" in tokens
    assert "-serverMod=@ServerOnly" in tokens
    assert layout.profiles.is_dir()
