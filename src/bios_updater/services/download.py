"""HTTP transfer of catalog documents and BIOS packages."""

import logging
from pathlib import Path
from typing import Optional

import aiofiles
import httpx

from bios_updater.config import UpdaterSettings
from bios_updater.errors import IntegrityError, NetworkError
from bios_updater.models.status import StageEnum
from bios_updater.services.state_manager import StateManager
from bios_updater.utils.verification import verify_md5_or_raise


class DownloadService:
    """Fetches catalog cabinets into memory and streams packages to disk.

    No retry and no resume: a failed transfer aborts the run.
    """

    def __init__(
        self,
        settings: Optional[UpdaterSettings] = None,
        state_manager: Optional[StateManager] = None,
    ):
        """Initialize download service.

        Args:
            settings: Updater settings (defaults if None)
            state_manager: StateManager instance (uses singleton if None)
        """
        self.logger = logging.getLogger("bios_updater.download")
        self.settings = settings or UpdaterSettings()
        self.state_manager = state_manager or StateManager()
        self.chunk_size = 64 * 1024  # 64KB chunks for progress granularity

    async def fetch_document(self, url: str) -> bytes:
        """Fetch a whole document (catalog or manifest cabinet) into memory.

        Args:
            url: Absolute document URL

        Returns:
            Response body

        Raises:
            NetworkError: On transport failure or non-2xx status
        """
        self.logger.info(f"Fetching document: {url}")
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.document_timeout, follow_redirects=True
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self.logger.error(f"Document fetch failed: {e}")
            raise NetworkError(
                f"HTTP {e.response.status_code} fetching {url}", url=url
            ) from e
        except httpx.HTTPError as e:
            self.logger.error(f"Document fetch failed: {e}")
            raise NetworkError(f"Failed to fetch {url}: {e}", url=url) from e

        self.logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content

    async def download_package(
        self,
        package_url: str,
        package_name: str,
        package_size: Optional[int] = None,
        package_md5: Optional[str] = None,
    ) -> Path:
        """Download a BIOS package and verify it when the catalog has a hash.

        Args:
            package_url: Absolute package URL
            package_name: Target filename under the tmp directory
            package_size: Expected bytes, used for progress only
            package_md5: Expected MD5 hash from the catalog, if any

        Returns:
            Path to downloaded package file

        Raises:
            NetworkError: If the download fails
            IntegrityError: If MD5 verification fails
        """
        target_path = Path(self.settings.tmp_dir) / package_name
        target_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger.info(
            f"Starting download: url={package_url}, target={target_path}, "
            f"size={package_size} bytes"
        )

        self.state_manager.update_status(
            stage=StageEnum.DOWNLOADING,
            progress=0,
            message=f"Downloading {package_name}...",
        )

        try:
            bytes_downloaded = await self._stream_to_file(
                url=package_url,
                target_path=target_path,
                package_size=package_size,
            )
        except httpx.HTTPError as e:
            self.logger.error(f"Download failed: {e}", exc_info=True)
            self.state_manager.update_status(
                stage=StageEnum.FAILED,
                progress=0,
                message="Download failed",
                error=f"{NetworkError.code}: {str(e)}",
            )
            raise NetworkError(f"Failed to download {package_url}: {e}", url=package_url) from e

        self.logger.info(f"Downloaded {bytes_downloaded} bytes")

        if not package_md5:
            self.logger.info("Catalog has no MD5 for this package, skipping verification")
            return target_path

        self.state_manager.update_status(
            stage=StageEnum.VERIFYING,
            progress=0,
            message="Verifying package integrity...",
        )

        try:
            verify_md5_or_raise(target_path, package_md5)
        except IntegrityError as e:
            self.logger.error(f"MD5 verification failed: {e}")
            target_path.unlink(missing_ok=True)  # Delete corrupted file
            self.state_manager.update_status(
                stage=StageEnum.FAILED,
                progress=0,
                message="MD5 verification failed",
                error=str(e),
            )
            raise

        self.logger.info("MD5 verification passed")
        return target_path

    async def _stream_to_file(
        self,
        url: str,
        target_path: Path,
        package_size: Optional[int],
    ) -> int:
        """Stream an HTTP response body into a file.

        Args:
            url: Download URL
            target_path: Target file path (overwritten)
            package_size: Expected bytes; Content-Length is used when None

        Returns:
            Number of bytes written
        """
        bytes_downloaded = 0

        async with httpx.AsyncClient(
            timeout=self.settings.download_timeout, follow_redirects=True
        ) as client:
            async with client.stream("GET", url) as response:
                response.raise_for_status()

                total = package_size or int(response.headers.get("Content-Length") or 0)
                async with aiofiles.open(target_path, "wb") as f:
                    last_progress = -1
                    async for chunk in response.aiter_bytes(chunk_size=self.chunk_size):
                        await f.write(chunk)
                        bytes_downloaded += len(chunk)

                        if not total:
                            continue

                        # Update progress every 5%
                        current_progress = min(int((bytes_downloaded / total) * 100), 100)
                        if current_progress >= last_progress + 5:
                            last_progress = current_progress
                            self.logger.debug(
                                f"Download progress: {current_progress}% "
                                f"({bytes_downloaded}/{total} bytes)"
                            )
                            self.state_manager.update_status(
                                stage=StageEnum.DOWNLOADING,
                                progress=current_progress,
                                message=f"Downloading {target_path.name}...",
                            )

        return bytes_downloaded
