"""
Exception hierarchy for the launcher.

Components return result values (``InstallResult``, ``BatchResult``) for
SteamCMD and filesystem failures; these exceptions are raised for
precondition violations and by ``raise_for_status()`` when a command has to
stop.
"""
from __future__ import annotations
from typing import List, Optional


class LauncherError(Exception):
    """Base class for all launcher errors."""


class ConfigValidationError(LauncherError):
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Configuration validation failed: " + "; ".join(self.errors))


class MissingDependencyError(LauncherError):
    """A prerequisite artifact (SteamCMD, start script, ...) is absent."""


class MissingCredentialsError(LauncherError):
    """Steam credentials were not supplied to a component that needs them."""


class ExternalToolError(LauncherError):
    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class SteamGuardRequiredError(ExternalToolError):
    """SteamCMD asked for a Steam Guard code (exit code 5)."""
