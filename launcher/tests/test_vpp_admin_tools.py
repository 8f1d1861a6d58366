"""
Tests for the VPP Admin Tools configurator.
"""

import hashlib

import pytest

from dayz_launcher.fs_layout import build_layout
from dayz_launcher.models import DayZConfig, ModEntry
from dayz_launcher.mods.configurators import VPPAdminToolsConfigurator


def _configurator(paths, block=None, mod_config=None):
    mods = [ModEntry(workshop_id="1708571776", name="@VPPAdminTools", config=mod_config)]
    cfg = DayZConfig(mods=mods, mod_configs={"vppAdminTools": block} if block is not None else {}, paths=paths)
    return VPPAdminToolsConfigurator(cfg, build_layout(paths))


def _permissions(layout):
    return layout.profiles / "VPPAdminTools" / "Permissions"


def test_no_config_block_is_skipped(paths, layout):
    assert _configurator(paths).configure() is False
    assert not _permissions(layout).exists()


def test_super_admins_one_per_line(paths, layout):
    configurator = _configurator(paths, {"superAdmins": [76561198000000001, "76561198000000002"], "password": "pw"})
    assert configurator.configure() is True
    text = (_permissions(layout) / "SuperAdmins" / "SuperAdmins.txt").read_text(encoding="utf-8")
    assert text == "76561198000000001\n76561198000000002\n"


def test_plaintext_password(paths, layout):
    _configurator(paths, {"password": "secret"}).configure()
    assert (_permissions(layout) / "credentials.txt").read_text(encoding="utf-8") == "secret"


def test_sha256_password(paths, layout):
    _configurator(paths, {"password": "secret", "passwordFormat": "sha256"}).configure()
    expected = hashlib.sha256(b"secret").hexdigest()
    assert (_permissions(layout) / "credentials.txt").read_text(encoding="utf-8") == expected


def test_no_password_leaves_credentials_untouched(paths, layout):
    assert _configurator(paths, {"superAdmins": ["1"]}).configure() is True
    assert not (_permissions(layout) / "credentials.txt").exists()


def test_invalid_password_format_is_skipped(paths, layout):
    assert _configurator(paths, {"password": "pw", "passwordFormat": "md5"}).configure() is False


def test_mod_entry_config_is_fallback(paths, layout):
    _configurator(paths, mod_config={"superAdmins": ["42"], "password": "pw"}).configure()
    text = (_permissions(layout) / "SuperAdmins" / "SuperAdmins.txt").read_text(encoding="utf-8")
    assert text == "42\n"


class TestDisablePassword:
    def test_flag_appended(self, paths, layout):
        layout.server_cfg.parent.mkdir(parents=True)
        layout.server_cfg.write_text('hostname = "x";', encoding="utf-8")

        _configurator(paths, {"disablePassword": True, "password": "ignored"}).configure()

        cfg = layout.server_cfg.read_text(encoding="utf-8")
        assert cfg.startswith('hostname = "x";\n')
        assert cfg.endswith("// VPP Admin Tools - Disable password requirement\nvppDisablePassword = 1;\n")
        assert (_permissions(layout) / "credentials.txt").read_text(encoding="utf-8") == ""

    def test_flag_replaced_in_place(self, paths, layout):
        layout.server_cfg.parent.mkdir(parents=True)
        layout.server_cfg.write_text('hostname = "x";\nvppDisablePassword = 0;\nmaxPlayers = 60;\n',
                                     encoding="utf-8")

        _configurator(paths, {"disablePassword": True}).configure()

        cfg = layout.server_cfg.read_text(encoding="utf-8")
        assert cfg == 'hostname = "x";\nvppDisablePassword = 1;\nmaxPlayers = 60;\n'

    def test_any_existing_value_is_replaced(self, paths, layout):
        layout.server_cfg.parent.mkdir(parents=True)
        layout.server_cfg.write_text("vppDisablePassword = 2;\nmaxPlayers = 60;\n", encoding="utf-8")

        _configurator(paths, {"disablePassword": True}).configure()

        cfg = layout.server_cfg.read_text(encoding="utf-8")
        assert cfg == "vppDisablePassword = 1;\nmaxPlayers = 60;\n"

    def test_running_twice_does_not_duplicate(self, paths, layout):
        layout.server_cfg.parent.mkdir(parents=True)
        layout.server_cfg.write_text("", encoding="utf-8")
        configurator = _configurator(paths, {"disablePassword": True})
        configurator.configure()
        configurator.configure()
        assert layout.server_cfg.read_text(encoding="utf-8").count("vppDisablePassword") == 1

    def test_missing_server_cfg_still_writes_files(self, paths, layout):
        assert _configurator(paths, {"disablePassword": True}).configure() is True
        assert not layout.server_cfg.exists()
        assert (_permissions(layout) / "credentials.txt").exists()

    @pytest.mark.parametrize("block", [{"password": "pw"}, {"disablePassword": False, "password": "pw"}])
    def test_cfg_untouched_when_password_enabled(self, paths, layout, block):
        layout.server_cfg.parent.mkdir(parents=True)
        layout.server_cfg.write_text("x = 1;\n", encoding="utf-8")
        _configurator(paths, block).configure()
        assert layout.server_cfg.read_text(encoding="utf-8") == "x = 1;\n"
