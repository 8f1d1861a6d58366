"""
supervisor.py — Runs the DayZ server start script as a child process
--------------------------------------------------------------------
Forwards SIGINT/SIGTERM to the server, force-kills it when it does not stop
within the grace period, and hands the server's exit code back to the caller
so the container exits with it. There is no restart policy here; restarting
is left to the container runtime.
"""

from __future__ import annotations
import signal
import subprocess
import threading
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import LauncherError, MissingDependencyError
from .logging_setup import get_logger

log = get_logger("dayz.launcher.supervisor")

FORWARDED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SupervisorState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    EXITED = "exited"
    KILLED = "killed"


class ServerSupervisor:
    def __init__(self, script: Path, cwd: Path, grace_seconds: float = 10.0):
        self.script = script
        self.cwd = cwd
        self.grace_seconds = grace_seconds
        self.state = SupervisorState.NOT_STARTED
        self.proc: Optional[subprocess.Popen] = None
        self.exit_code: Optional[int] = None
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def start(self, *, install_handlers: bool = True) -> None:
        if not self.script.is_file():
            raise MissingDependencyError(f"Startup script not found: {self.script}. Run generate-config first.")

        log.info("Starting server: bash %s (cwd=%s)", self.script, self.cwd)
        try:
            self.proc = subprocess.Popen(["bash", str(self.script)], cwd=str(self.cwd))
        except OSError as e:
            raise LauncherError(f"Failed to start server: {e}") from e
        self.state = SupervisorState.RUNNING

        if install_handlers:
            for sig in FORWARDED_SIGNALS:
                signal.signal(sig, self.handle_signal)

    def handle_signal(self, signum: int, _frame=None) -> None:
        proc = self.proc
        if proc is None or proc.poll() is not None:
            log.info("Received %s, no running server.", signal.Signals(signum).name)
            return

        log.info("Received %s, forwarding to server (pid=%s).", signal.Signals(signum).name, proc.pid)
        proc.send_signal(signum)
        with self._lock:
            if self._timer is not None:
                return
            self._timer = threading.Timer(self.grace_seconds, self._force_kill)
            self._timer.daemon = True
            self._timer.start()

    def _force_kill(self) -> None:
        proc = self.proc
        if proc is None or proc.poll() is not None:
            return
        log.warning("Server did not stop within %ss, killing (pid=%s).", self.grace_seconds, proc.pid)
        self.state = SupervisorState.KILLED
        proc.kill()

    def wait(self) -> int:
        if self.proc is None:
            raise LauncherError("Server process was never started")

        rc = self.proc.wait()
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()

        if self.state is not SupervisorState.KILLED:
            self.state = SupervisorState.EXITED
        # negative: ended by a signal, no exit code of its own
        self.exit_code = rc if rc is not None and rc >= 0 and self.state is SupervisorState.EXITED else 0
        log.info("Server exited with rc=%s (state=%s)", rc, self.state.value)
        return self.exit_code

    def run(self) -> int:
        self.start()
        return self.wait()
