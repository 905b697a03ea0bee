"""Elevated launch of a downloaded BIOS update package."""

import asyncio
import logging
import sys
from pathlib import Path

from bios_updater.errors import InstallerError

SILENT_FLAG = "/s"
RESTART_FLAG = "/r"


def _ps_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class InstallerService:
    """Launches vendor update packages with elevation.

    The package runs on its own: only the launch is awaited, not the flash.
    """

    LAUNCH_TIMEOUT = 60.0  # seconds, covers the UAC prompt

    def __init__(self, powershell: str = "powershell"):
        """Initialize installer service.

        Args:
            powershell: PowerShell executable used for elevation
        """
        self.logger = logging.getLogger("bios_updater.installer")
        self.powershell = powershell

    def build_arguments(self, silent: bool, auto_restart: bool) -> list[str]:
        """Vendor package switches for the requested mode."""
        arguments = []
        if silent:
            arguments.append(SILENT_FLAG)
        if auto_restart:
            arguments.append(RESTART_FLAG)
        return arguments

    def build_command(self, file_path: Path, silent: bool, auto_restart: bool) -> list[str]:
        """PowerShell command line starting the package elevated."""
        script = f"Start-Process -FilePath {_ps_quote(str(file_path))} -Verb RunAs"
        arguments = self.build_arguments(silent, auto_restart)
        if arguments:
            script += " -ArgumentList " + ",".join(_ps_quote(a) for a in arguments)
        return [self.powershell, "-NoProfile", "-NonInteractive", "-Command", script]

    async def run_installer(
        self, file_path: Path, silent: bool = True, auto_restart: bool = False
    ) -> None:
        """Launch a BIOS update package with elevated privileges.

        Args:
            file_path: Downloaded package executable
            silent: Run without the vendor UI
            auto_restart: Let the package restart the machine when done

        Raises:
            InstallerError: If the package is missing, the platform is not
                Windows, or the launch fails
        """
        if not file_path.exists():
            raise InstallerError(f"Package not found: {file_path}")
        if sys.platform != "win32":
            raise InstallerError(
                f"BIOS packages can only be launched on Windows (platform: {sys.platform})"
            )

        command = self.build_command(file_path.resolve(), silent, auto_restart)
        self.logger.info(
            f"Launching installer: {file_path.name} silent={silent} auto_restart={auto_restart}"
        )

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.LAUNCH_TIMEOUT
            )
        except (OSError, asyncio.TimeoutError) as e:
            self.logger.error(f"Failed to launch {file_path.name}: {e!r}")
            raise InstallerError(f"Failed to launch {file_path.name}: {e!r}") from e

        if process.returncode != 0:
            raise InstallerError(
                f"Launch of {file_path.name} failed: "
                f"exit code {process.returncode}, "
                f"stderr: {stderr.decode(errors='replace').strip()}"
            )

        self.logger.info(f"Installer {file_path.name} launched")
