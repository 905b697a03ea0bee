"""Local hardware identity probe (model, SKU, OEM strings, BIOS version)."""

import asyncio
import json
import logging
import re
import sys
from pathlib import Path
from typing import Optional

from bios_updater.errors import UnresolvableIdentityError
from bios_updater.models.identity import RawHardwareIdentity

POWERSHELL_SCRIPT = """
$cs = Get-CimInstance Win32_ComputerSystem
$bios = Get-CimInstance Win32_BIOS
@{
    Model = $cs.Model
    SKU = $cs.SystemSKUNumber
    OEMStrings = @($cs.OEMStringArray)
    BIOSVersion = $bios.SMBIOSBIOSVersion
} | ConvertTo-Json -Compress
"""

DMIDECODE_STRING = re.compile(r"^\s*String \d+:\s?(.*)$")


class HardwareProbe:
    """Reads the machine identity from WMI (Windows) or DMI tables (Linux)."""

    PROBE_TIMEOUT = 15.0  # seconds

    def __init__(self, dmi_dir: str = "/sys/class/dmi/id", powershell: str = "powershell"):
        """Initialize hardware probe.

        Args:
            dmi_dir: sysfs DMI directory (Linux)
            powershell: PowerShell executable (Windows)
        """
        self.logger = logging.getLogger("bios_updater.hardware")
        self.dmi_dir = Path(dmi_dir)
        self.powershell = powershell

    async def fetch_identity(self) -> RawHardwareIdentity:
        """Read identity fields of the local machine.

        Returns:
            RawHardwareIdentity (system id not yet resolved)

        Raises:
            UnresolvableIdentityError: If the identity cannot be read
        """
        if sys.platform == "win32":
            identity = await self._fetch_windows()
        else:
            identity = await self._fetch_linux()

        self.logger.info(
            f"Hardware identity: model={identity.model!r}, sku={identity.sku_number!r}, "
            f"bios={identity.installed_bios_version!r}"
        )
        return identity

    async def _run(self, *command: str) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.PROBE_TIMEOUT
            )
        except (OSError, asyncio.TimeoutError) as e:
            raise UnresolvableIdentityError(f"Failed to run {command[0]}: {e!r}") from e

        if process.returncode != 0:
            raise UnresolvableIdentityError(
                f"{command[0]} exited with code {process.returncode}: "
                f"{stderr.decode(errors='replace').strip()}"
            )
        return stdout.decode(errors="replace")

    async def _fetch_windows(self) -> RawHardwareIdentity:
        output = await self._run(
            self.powershell, "-NoProfile", "-NonInteractive", "-Command", POWERSHELL_SCRIPT
        )
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise UnresolvableIdentityError(f"Invalid WMI output: {e}") from e

        oem_strings = data.get("OEMStrings") or []
        if isinstance(oem_strings, str):
            oem_strings = [oem_strings]

        return RawHardwareIdentity(
            model=(data.get("Model") or "").strip(),
            sku_number=(data.get("SKU") or "").strip() or None,
            oem_strings=[s for s in oem_strings if s is not None],
            installed_bios_version=(data.get("BIOSVersion") or "").strip(),
        )

    def _read_dmi(self, name: str) -> Optional[str]:
        try:
            value = (self.dmi_dir / name).read_text(encoding="utf-8", errors="replace").strip()
        except OSError as e:
            self.logger.debug(f"Cannot read DMI field {name}: {e}")
            return None
        return value or None

    async def _fetch_linux(self) -> RawHardwareIdentity:
        model = self._read_dmi("product_name")
        bios_version = self._read_dmi("bios_version")
        if model is None or bios_version is None:
            raise UnresolvableIdentityError(f"DMI identity not readable under {self.dmi_dir}")

        sku_number = self._read_dmi("product_sku")
        oem_strings: list[str] = []
        if sku_number is None:
            # OEM strings are only needed without a SKU; dmidecode requires root
            output = await self._run("dmidecode", "-t", "11")
            oem_strings = parse_dmidecode_oem_strings(output)

        return RawHardwareIdentity(
            model=model,
            sku_number=sku_number,
            oem_strings=oem_strings,
            installed_bios_version=bios_version,
        )


def parse_dmidecode_oem_strings(output: str) -> list[str]:
    """Extract ``String N:`` values from ``dmidecode -t 11`` output."""
    strings = []
    for line in output.splitlines():
        match = DMIDECODE_STRING.match(line)
        if match:
            strings.append(match.group(1).strip())
    return strings
