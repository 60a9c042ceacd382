"""Run a Specmatic stub server in Docker for contract tests.

The server is treated as an opaque fixture: start it, register stubs, stop it.
Specmatic does not hot-reload stub files, so registering a stub while the
container is running restarts it.
"""

from __future__ import annotations

import json
import shutil
import subprocess
import time
import uuid
from pathlib import Path
from typing import List, Optional

import requests

from contract_testing.stubs import StubDefinition
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="contract_testing/stub_server")

DEFAULT_IMAGE = "specmatic/specmatic:latest"
CONTRACT_FILE = "weather-api-contract.yaml"
CONFIG_FILE = "specmatic.yaml"
STUBS_DIR = "stubs"
TEMP_STUB_PREFIX = "temp_"
CONTAINER_PORT = 9000


class StubServerError(RuntimeError):
    """Raised when the stub container cannot be managed."""


class StubServerTimeoutError(StubServerError):
    """Raised when the stub server never reports healthy."""


def docker_available() -> bool:
    """Return True when a docker CLI is on PATH and the daemon answers."""
    if shutil.which("docker") is None:
        return False
    try:
        result = subprocess.run(["docker", "info"], capture_output=True, text=True, timeout=10)
    except (OSError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0


class SpecmaticStubServer:
    """Lifecycle wrapper around a `specmatic stub` container."""

    def __init__(
        self,
        port: int = 9000,
        contract_dir: Optional[Path | str] = None,
        *,
        image: str = DEFAULT_IMAGE,
        max_attempts: int = 30,
        poll_interval: float = 1.0,
        log=None,
    ) -> None:
        self.port = port
        self.contract_dir = Path(contract_dir) if contract_dir else Path.cwd() / "contract"
        self.image = image
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval
        self._logger = log or logger
        self._container_id: Optional[str] = None
        self._started = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return f"http://localhost:{self.port}"

    @property
    def stubs_dir(self) -> Path:
        return self.contract_dir / STUBS_DIR

    @property
    def is_running(self) -> bool:
        if not self._started or not self._container_id:
            return False
        result = self._docker("inspect", "-f", "{{.State.Running}}", self._container_id, check=False)
        return result.returncode == 0 and result.stdout.strip() == "true"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Validate the contract folder, start the container, and wait for health."""
        if self._started:
            self._logger.warning("Specmatic stub server is already started")
            return

        try:
            self.validate_configuration()
            self.load_stub_files()
            self._start_container()
            self._wait_until_healthy()
        except Exception:
            self._logger.exception("Failed to start Specmatic stub server")
            if self._container_id:
                self._logger.error(f"Specmatic container output:\n{self.container_logs()}")
            self._remove_container()
            raise

        self._started = True
        self._logger.info(f"Specmatic stub server started on {self.base_url}")

    def stop(self) -> None:
        """Stop and remove the container."""
        if not self._started or not self._container_id:
            self._logger.warning("Specmatic stub server is not running")
            return

        self._remove_container()
        self._started = False
        self._logger.info("Specmatic stub server stopped")

    def restart(self) -> None:
        """Restart so Specmatic picks up stub files written since start."""
        self._logger.info("Restarting Specmatic stub server to reload stubs")
        self.stop()
        self.start()

    def register_stub(self, stub: StubDefinition, name: Optional[str] = None) -> Path:
        """Write `stub` as a temporary stub file, restarting the server if it is up."""
        self.stubs_dir.mkdir(parents=True, exist_ok=True)
        name = name or uuid.uuid4().hex[:8]
        path = self.stubs_dir / f"{TEMP_STUB_PREFIX}{name}.json"
        path.write_text(stub.to_json(), encoding="utf-8")
        self._logger.info("Registered stub", extra={"stub_file": str(path)})

        if self._started:
            self.restart()
        return path

    def clear_temporary_stubs(self) -> int:
        """Delete stubs written by register_stub; return how many were removed."""
        if not self.stubs_dir.is_dir():
            return 0
        removed = 0
        for path in self.stubs_dir.glob(f"{TEMP_STUB_PREFIX}*.json"):
            path.unlink()
            removed += 1
        if removed:
            self._logger.debug(f"Removed {removed} temporary stub files")
        return removed

    def __enter__(self) -> "SpecmaticStubServer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Contract folder
    # ------------------------------------------------------------------

    def validate_configuration(self) -> None:
        """
        Check the contract folder layout.

        The contract YAML and the stubs directory are required; specmatic.yaml
        is optional. Every stub file must be valid JSON.
        """
        contract_file = self.contract_dir / CONTRACT_FILE
        if not contract_file.is_file():
            raise FileNotFoundError(f"Contract file not found: {contract_file}")

        config_file = self.contract_dir / CONFIG_FILE
        if not config_file.is_file():
            self._logger.warning(f"Specmatic configuration file not found: {config_file}")

        if not self.stubs_dir.is_dir():
            raise FileNotFoundError(f"Stubs directory not found: {self.stubs_dir}")

        for stub_file in sorted(self.stubs_dir.glob("*.json")):
            try:
                json.loads(stub_file.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                self._logger.error(f"Invalid JSON in stub file {stub_file.name}: {exc}")
                raise ValueError(f"Invalid JSON in stub file {stub_file.name}: {exc}") from exc

        self._logger.info("Specmatic configuration validated", extra={"contract_dir": str(self.contract_dir)})

    def load_stub_files(self) -> List[Path]:
        """Return the stub files Specmatic will serve."""
        if not self.stubs_dir.is_dir():
            self._logger.info(f"Stubs directory does not exist: {self.stubs_dir}")
            return []
        files = sorted(self.stubs_dir.glob("*.json"))
        self._logger.info(f"Loaded {len(files)} stub files from {self.stubs_dir}")
        return files

    # ------------------------------------------------------------------
    # Docker plumbing
    # ------------------------------------------------------------------

    def container_logs(self) -> str:
        """Return combined stdout/stderr of the container, or a short reason."""
        if not self._container_id:
            return "Container not available"
        result = self._docker("logs", self._container_id, check=False)
        return result.stdout + result.stderr

    def _docker(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        cmd = ["docker", *args]
        self._logger.debug("Running docker command", extra={"cmd": " ".join(cmd)})
        result = subprocess.run(cmd, capture_output=True, text=True)
        if check and result.returncode != 0:
            raise StubServerError(f"docker {args[0]} failed: {result.stderr.strip()}")
        return result

    def _start_container(self) -> None:
        mount = self.contract_dir.resolve()
        result = self._docker(
            "run", "-d", "--rm",
            "-p", f"{self.port}:{CONTAINER_PORT}",
            "-v", f"{mount}:/app",
            "-e", "SPECMATIC_STUB_STRICT=true",
            "-e", "SPECMATIC_LOG_LEVEL=DEBUG",
            self.image,
            "stub", f"/app/{CONTRACT_FILE}",
            "--port", str(CONTAINER_PORT),
            "--data", f"/app/{STUBS_DIR}",
            "--config", f"/app/{CONFIG_FILE}",
            "--strict",
            "--host", "0.0.0.0",
        )
        self._container_id = result.stdout.strip()
        self._logger.info("Specmatic container started", extra={"container_id": self._container_id})

    def _remove_container(self) -> None:
        if not self._container_id:
            return
        self._docker("rm", "-f", self._container_id, check=False)
        self._container_id = None

    def _wait_until_healthy(self) -> None:
        url = f"{self.base_url}/actuator/health"
        for attempt in range(1, self.max_attempts + 1):
            try:
                resp = requests.get(url, timeout=5)
                if resp.ok:
                    self._logger.info(f"Specmatic stub server ready after {attempt} attempts")
                    return
            except requests.RequestException as exc:
                self._logger.debug(f"Health check attempt {attempt} failed: {exc}")
            if attempt < self.max_attempts:
                time.sleep(self.poll_interval)

        raise StubServerTimeoutError(
            f"Specmatic stub server failed to start within {self.max_attempts} attempts"
        )
