from __future__ import annotations

import logging
import subprocess
from typing import Optional

from .config import settings

logger = logging.getLogger("adb_api.device")

EMPTY_OUTPUT_MESSAGE = "Command executed successfully"


class AdbCommandError(RuntimeError):
    """The adb binary could not run the command or reported a failure."""


class AdbClient:
    """Thin wrapper over ``adb [-s serial] shell ...``.

    Holds the currently selected device serial. When no serial is selected,
    adb itself picks the only connected device (and fails if there are
    several).
    """

    def __init__(self, adb_path: str = "adb", timeout: float = 30.0, serial: Optional[str] = None):
        self.adb_path = adb_path
        self.timeout = timeout
        self._serial = serial or None

    @property
    def selected_device(self) -> Optional[str]:
        return self._serial

    def select_device(self, serial: Optional[str]) -> None:
        self._serial = (serial or "").strip() or None
        logger.info(f"📱 Selected device: {self._serial or 'default'}")

    def _base_args(self) -> list[str]:
        args = [self.adb_path]
        serial = self._serial
        if serial:
            args.extend(["-s", serial])
        return args

    def shell(self, command: str) -> str:
        """Run ``command`` in the device shell and return its stdout."""
        args = self._base_args() + ["shell", command]
        logger.debug(f"Running: {args}")
        try:
            proc = subprocess.run(args, capture_output=True, text=True, timeout=self.timeout, check=False)
        except FileNotFoundError as e:
            raise AdbCommandError(f"ADB command failed: adb binary not found ({self.adb_path})") from e
        except subprocess.TimeoutExpired as e:
            raise AdbCommandError(f"ADB command failed: timed out after {self.timeout:g}s") from e

        stderr = (proc.stderr or "").strip()
        if proc.returncode != 0:
            raise AdbCommandError(f"ADB command failed: {stderr or f'exit status {proc.returncode}'}")
        if stderr and "warning" not in stderr.lower():
            raise AdbCommandError(f"ADB command failed: {stderr}")

        return proc.stdout or EMPTY_OUTPUT_MESSAGE


def create_client() -> AdbClient:
    return AdbClient(
        adb_path=settings.adb_path,
        timeout=settings.adb_timeout,
        serial=settings.adb_serial,
    )
