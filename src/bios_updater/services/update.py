"""Update orchestration: identity -> catalog -> manifest -> decision -> install."""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from bios_updater.config import UpdaterSettings
from bios_updater.errors import (
    NoCandidatePackageError,
    UnsupportedSystemError,
    UpdaterError,
)
from bios_updater.models.context import RunContext
from bios_updater.models.decision import UpdateDecision
from bios_updater.models.identity import SystemIdentity
from bios_updater.models.status import DecisionEnum, StageEnum
from bios_updater.services.archive import ArchiveService, manifest_member_name
from bios_updater.services.catalog import find_manifest_path
from bios_updater.services.decision import decide
from bios_updater.services.download import DownloadService
from bios_updater.services.hardware import HardwareProbe
from bios_updater.services.installer import InstallerService
from bios_updater.services.manifest import select_latest_bios_package
from bios_updater.services.state_manager import StateManager
from bios_updater.utils.documents import parse_xml


class UpdateService:
    """Runs one update check (and optionally an install) end to end.

    Every run re-fetches the catalog; nothing is cached between runs.
    """

    def __init__(
        self,
        settings: Optional[UpdaterSettings] = None,
        state_manager: Optional[StateManager] = None,
        hardware: Optional[HardwareProbe] = None,
        downloader: Optional[DownloadService] = None,
        archive: Optional[ArchiveService] = None,
        installer: Optional[InstallerService] = None,
    ):
        self.logger = logging.getLogger("bios_updater.update")
        self.settings = settings or UpdaterSettings()
        self.state_manager = state_manager or StateManager()
        self.hardware = hardware or HardwareProbe()
        self.downloader = downloader or DownloadService(self.settings, self.state_manager)
        self.archive = archive or ArchiveService()
        self.installer = installer or InstallerService()

    async def resolve_context(self) -> RunContext:
        """Read and resolve the local identity.

        Raises:
            UnresolvableIdentityError: If no system id can be derived
        """
        raw = await self.hardware.fetch_identity()
        identity = SystemIdentity.from_raw(raw)
        context = RunContext.create(identity, self.settings)
        self.logger.info(
            f"Run context: system_id={identity.system_id}, "
            f"model_token={context.model_token!r}"
        )
        return context

    async def _fetch_cab_document(self, url: str, inner_name: str) -> ET.Element:
        archive_bytes = await self.downloader.fetch_document(url)
        document = await self.archive.extract_member(archive_bytes, inner_name)
        return parse_xml(document)

    async def check(self) -> UpdateDecision:
        """Resolve whether a BIOS update is available for this machine.

        Returns:
            UpdateDecision (upToDate, updateAvailable, unsupported or indeterminate)

        Raises:
            UnresolvableIdentityError, NetworkError, ArchiveExtractionError,
            DocumentParseError: Unrecoverable for the run
        """
        self.state_manager.update_status(
            stage=StageEnum.RESOLVING,
            progress=0,
            message="Reading hardware identity...",
        )

        try:
            decision = await self._resolve()
        except UpdaterError as e:
            self.logger.error(f"Update check aborted: {e}")
            self.state_manager.update_status(
                stage=StageEnum.FAILED,
                progress=0,
                message="Update check failed",
                error=str(e),
            )
            raise
        except Exception as e:
            self.logger.error(f"Unexpected error during update check: {e}", exc_info=True)
            self.state_manager.update_status(
                stage=StageEnum.FAILED,
                progress=0,
                message="Update check failed",
                error=f"UNEXPECTED_ERROR: {e}",
            )
            raise

        self.state_manager.record_decision(decision)
        self.state_manager.update_status(
            stage=StageEnum.SUCCESS,
            progress=100,
            message=decision.message,
        )
        return decision

    async def _resolve(self) -> UpdateDecision:
        context = await self.resolve_context()

        self.state_manager.update_status(
            stage=StageEnum.RESOLVING,
            progress=25,
            message="Fetching vendor catalog...",
        )
        catalog = await self._fetch_cab_document(
            self.settings.catalog_url, self.settings.catalog_file
        )
        manifest_path = find_manifest_path(catalog, context.identity.system_id)
        if manifest_path is None:
            return decide(context, None, None)

        self.state_manager.update_status(
            stage=StageEnum.RESOLVING,
            progress=60,
            message="Fetching model manifest...",
        )
        manifest = await self._fetch_cab_document(
            self.settings.resolve_url(manifest_path),
            manifest_member_name(manifest_path),
        )
        candidate = select_latest_bios_package(manifest, context.model_token)
        return decide(context, manifest_path, candidate)

    async def install(self, silent: bool = True, auto_restart: bool = False) -> UpdateDecision:
        """Check, then download and launch the BIOS package if an update is available.

        Up-to-date and indeterminate-version decisions are returned without
        installing anything.

        Args:
            silent: Run the package without its UI
            auto_restart: Let the package restart the machine

        Returns:
            The decision the install was based on

        Raises:
            UnsupportedSystemError: System not in the catalog
            NoCandidatePackageError: No BIOS package for this model
            UpdaterError: Any unrecoverable failure of the run
        """
        decision = await self.check()

        if decision.outcome == DecisionEnum.UNSUPPORTED:
            raise UnsupportedSystemError(decision.message)
        if decision.reason == NoCandidatePackageError.code:
            raise NoCandidatePackageError(decision.message)
        if not decision.update_available:
            self.logger.info(f"Nothing to install: {decision.message}")
            return decision

        package = decision.package
        try:
            package_path = await self.downloader.download_package(
                package_url=self.settings.resolve_url(package.download_path),
                package_name=package.file_name,
                package_size=package.size,
                package_md5=package.hash_md5,
            )

            self.state_manager.update_status(
                stage=StageEnum.INSTALLING,
                progress=0,
                message=f"Launching BIOS {package.version_raw} installer...",
            )
            await self.installer.run_installer(
                Path(package_path), silent=silent, auto_restart=auto_restart
            )
        except UpdaterError as e:
            self.logger.error(f"Install aborted: {e}")
            self.state_manager.update_status(
                stage=StageEnum.FAILED,
                progress=0,
                message="BIOS install failed",
                error=str(e),
            )
            raise
        except Exception as e:
            self.logger.error(f"Unexpected error during install: {e}", exc_info=True)
            self.state_manager.update_status(
                stage=StageEnum.FAILED,
                progress=0,
                message="BIOS install failed",
                error=f"UNEXPECTED_ERROR: {e}",
            )
            raise

        self.state_manager.update_status(
            stage=StageEnum.SUCCESS,
            progress=100,
            message=f"BIOS {package.version_raw} installer launched",
        )
        return decision
