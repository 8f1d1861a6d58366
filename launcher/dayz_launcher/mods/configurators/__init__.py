"""Registry of the mod configurators shipped with the launcher."""
from __future__ import annotations
from typing import Dict, Tuple, Type
from .base import ModConfigurator, normalize_mod_name
from .vpp_admin_tools import VPPAdminToolsConfigurator

CONFIGURATORS: Tuple[Type[ModConfigurator], ...] = (
    VPPAdminToolsConfigurator,
)


def registry_keys() -> Dict[str, Type[ModConfigurator]]:
    keys: Dict[str, Type[ModConfigurator]] = {}
    for cls in CONFIGURATORS:
        for spelling in (cls.mod_name, *cls.aliases):
            keys[normalize_mod_name(spelling)] = cls
    return keys


__all__ = ["CONFIGURATORS", "ModConfigurator", "VPPAdminToolsConfigurator", "normalize_mod_name", "registry_keys"]
