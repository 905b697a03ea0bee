"""Exception taxonomy for the BIOS updater.

Every error carries a stable ``code`` which prefixes the user-facing error
string (e.g. ``NETWORK_ERROR: ...``), the same way status errors are
reported through the progress endpoint.
"""

from typing import Optional


class UpdaterError(Exception):
    """Base class for all updater errors."""

    code = "UPDATER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class UnresolvableIdentityError(UpdaterError):
    """No system identifier could be derived from the hardware identity."""

    code = "UNRESOLVABLE_IDENTITY"


class UnsupportedSystemError(UpdaterError):
    """System identifier is not listed in any catalog group manifest."""

    code = "UNSUPPORTED_SYSTEM"


class NoCandidatePackageError(UpdaterError):
    """Model manifest parsed, but no BIOS package matched the model."""

    code = "NO_CANDIDATE_PACKAGE"


class VersionFormatError(UpdaterError):
    """A firmware version string could not be interpreted."""

    code = "VERSION_FORMAT_ERROR"


class NetworkError(UpdaterError):
    """Transport failure or non-success HTTP status."""

    code = "NETWORK_ERROR"

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class ArchiveExtractionError(UpdaterError):
    """Cabinet archive could not be extracted."""

    code = "ARCHIVE_EXTRACTION_ERROR"


class DocumentParseError(UpdaterError):
    """Catalog or manifest document is not well-formed XML."""

    code = "DOCUMENT_PARSE_ERROR"


class IntegrityError(UpdaterError):
    """Downloaded package does not match the catalog MD5 hash."""

    code = "MD5_MISMATCH"


class InstallerError(UpdaterError):
    """Installer process could not be launched."""

    code = "INSTALLER_ERROR"
