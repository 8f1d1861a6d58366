"""Shared fixtures: a DayZConfig whose paths all live below tmp_path."""

import pytest

from dayz_launcher.fs_layout import build_layout
from dayz_launcher.models import DayZConfig, ModEntry, PathsConfig, SteamCredentials
from dayz_launcher.settings import Settings


@pytest.fixture
def paths(tmp_path):
    return PathsConfig(
        steamcmd=str(tmp_path / "steamcmd"),
        server_install=str(tmp_path / "server"),
        profiles=str(tmp_path / "server" / "profiles"),
        mods=str(tmp_path / "mods"),
    )


@pytest.fixture
def layout(paths):
    return build_layout(paths)


@pytest.fixture
def settings(tmp_path):
    return Settings(DAYZ_CONFIG=tmp_path / "dayz-config.yaml", LOG_LEVEL="DEBUG", SHUTDOWN_GRACE_SECONDS=1.0)


@pytest.fixture
def credentials():
    return SteamCredentials(username="user", password="secret")


@pytest.fixture
def config(paths):
    return DayZConfig(
        mods=[
            ModEntry(workshop_id="1559212036", name="@CF"),
            ModEntry(workshop_id="1708571776", name="@VPPAdminTools"),
            ModEntry(workshop_id="1111111111", name="@ServerOnly", client_required=False, server_side=True),
        ],
        paths=paths,
    )
