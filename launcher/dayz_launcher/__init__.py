"""
dayz_launcher package
---------------------
Installs and configures a DayZ dedicated server and its Steam Workshop mods
inside a container. Contains modules for configuration, SteamCMD integration,
mod handling, config generation, logging, and server process supervision.
"""

__version__ = "0.1.0"
