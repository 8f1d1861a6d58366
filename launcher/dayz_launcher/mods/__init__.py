from .manager import BatchResult, ModInstallOutcome, ModManager, StartupParams

__all__ = ["BatchResult", "ModInstallOutcome", "ModManager", "StartupParams"]
