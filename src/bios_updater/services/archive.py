"""Cabinet archive extraction through the platform's cab tool."""

import asyncio
import logging
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Optional

from bios_updater.errors import ArchiveExtractionError


class ArchiveService:
    """Extracts a single named member from a vendor cabinet archive.

    Uses ``expand.exe`` on Windows and ``cabextract`` elsewhere.
    """

    EXTRACT_TIMEOUT = 120.0  # seconds

    def __init__(self, tool: Optional[str] = None):
        """Initialize archive service.

        Args:
            tool: Extractor executable (platform default if None)
        """
        self.logger = logging.getLogger("bios_updater.archive")
        self.tool = tool or ("expand.exe" if sys.platform == "win32" else "cabextract")

    def _build_command(self, archive_path: Path, inner_name: str, out_dir: Path) -> list[str]:
        if Path(self.tool).stem.lower() == "expand":
            return [self.tool, str(archive_path), f"-F:{inner_name}", str(out_dir)]
        return [self.tool, "-q", "-F", inner_name, "-d", str(out_dir), str(archive_path)]

    async def extract_member(self, archive_bytes: bytes, inner_name: str) -> bytes:
        """Decompress one member of a cabinet archive.

        Args:
            archive_bytes: Cabinet file contents
            inner_name: Member file name (e.g., "CatalogIndexPC.xml")

        Returns:
            Member contents

        Raises:
            ArchiveExtractionError: If the tool is missing, fails, times out,
                or the member is not in the archive
        """
        if shutil.which(self.tool) is None:
            raise ArchiveExtractionError(f"Cabinet extractor not found: {self.tool}")

        with tempfile.TemporaryDirectory(prefix="bios_updater_") as tmp:
            work_dir = Path(tmp)
            archive_path = work_dir / "archive.cab"
            out_dir = work_dir / "out"
            out_dir.mkdir()
            archive_path.write_bytes(archive_bytes)

            command = self._build_command(archive_path, inner_name, out_dir)
            self.logger.debug(f"Extracting {inner_name}: {' '.join(command)}")

            try:
                process = await asyncio.create_subprocess_exec(
                    *command,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
                _, stderr = await asyncio.wait_for(
                    process.communicate(), timeout=self.EXTRACT_TIMEOUT
                )
            except asyncio.TimeoutError as e:
                process.kill()
                await process.wait()
                raise ArchiveExtractionError(
                    f"Extraction of {inner_name} timed out after {self.EXTRACT_TIMEOUT}s"
                ) from e
            except OSError as e:
                raise ArchiveExtractionError(f"Failed to run {self.tool}: {e}") from e

            if process.returncode != 0:
                raise ArchiveExtractionError(
                    f"{self.tool} exited with code {process.returncode}: "
                    f"{stderr.decode(errors='replace').strip()}"
                )

            # Member names are matched case-insensitively, as expand.exe does
            extracted = [
                p for p in out_dir.rglob("*")
                if p.is_file() and p.name.lower() == inner_name.lower()
            ]
            if not extracted:
                raise ArchiveExtractionError(f"{inner_name} not found in archive")

            data = extracted[0].read_bytes()

        self.logger.info(f"Extracted {inner_name} ({len(data)} bytes)")
        return data


def manifest_member_name(manifest_path: str) -> str:
    """Member name inside a model manifest cabinet: ``Latitude_07A8.cab`` -> ``Latitude_07A8.xml``."""
    file_name = manifest_path.replace("\\", "/").rsplit("/", 1)[-1]
    return f"{Path(file_name).stem}.xml"
