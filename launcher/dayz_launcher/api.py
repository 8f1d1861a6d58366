from __future__ import annotations
import os
from typing import Any, Dict, List, Optional
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from .settings import Settings
from .config_loader import load_config
from .errors import MissingDependencyError
from .orchestrator import Orchestrator
from .resolver import Resolution
from . import __version__

REDACTED = "***"

class ValidationReport(BaseModel):
    ok: bool
    errors: List[str]

class ModParams(BaseModel):
    mods: str
    server_mods: str
    configurators: List[str]

def _redact(document: Dict[str, Any]) -> Dict[str, Any]:
    server = document.get("server", {})
    for key in ("password", "adminPassword"):
        if server.get(key):
            server[key] = REDACTED
    vpp = document.get("modConfigs", {}).get("vppAdminTools")
    if isinstance(vpp, dict) and vpp.get("password"):
        vpp["password"] = REDACTED
    return document

def create_app(settings: Settings, environment: Optional[Dict[str, str]] = None) -> FastAPI:
    """Read-only status API. Never triggers SteamCMD or starts the server."""
    app = FastAPI(title="DayZ Launcher API", version=__version__)
    env = dict(os.environ) if environment is None else environment

    def resolution() -> Resolution:
        try:
            return load_config(settings.config_file, env)
        except MissingDependencyError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=422, detail=f"Config could not be parsed: {e}")

    def orchestrator() -> Orchestrator:
        res = resolution()
        if res.config is None:
            raise HTTPException(status_code=422, detail=res.errors)
        return Orchestrator(settings, res.config, res.credentials)

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/config")
    def get_config():
        res = resolution()
        if res.config is None:
            raise HTTPException(status_code=422, detail=res.errors)
        return _redact(res.config.to_document())

    @app.get("/validate", response_model=ValidationReport)
    def validate():
        res = resolution()
        return ValidationReport(ok=res.ok, errors=res.errors)

    @app.get("/mods", response_model=ModParams)
    def mods():
        orch = orchestrator()
        params = orch.mods.startup_params()
        return ModParams(mods=params.mods, server_mods=params.server_mods,
                         configurators=orch.mods.registered_names())

    @app.get("/status")
    def status():
        return {"ok": True, "data": orchestrator().status()}

    return app
