"""Updater settings with environment variable overrides."""

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "BIOS_UPDATER_"


class UpdaterSettings(BaseModel):
    """Runtime settings.

    Every field can be overridden with an environment variable named
    ``BIOS_UPDATER_<FIELD>``, e.g. ``BIOS_UPDATER_BASE_URL``.
    """

    catalog_url: str = Field(
        "https://downloads.dell.com/catalog/CatalogIndexPC.cab",
        pattern=r"^https?://.+",
        description="Catalog index cabinet URL",
    )
    base_url: str = Field(
        "https://downloads.dell.com/",
        pattern=r"^https?://.+",
        description="Base URL for manifest and package paths",
    )
    catalog_file: str = Field(
        "CatalogIndexPC.xml", description="Member name inside the catalog cabinet"
    )
    tmp_dir: str = Field("./tmp", description="Download directory")
    log_file: str = Field("./logs/updater.log", description="Rotating log file")
    log_level: str = Field("INFO", description="DEBUG/INFO/WARNING/ERROR")
    document_timeout: float = Field(60.0, gt=0, description="Catalog/manifest fetch timeout (s)")
    download_timeout: float = Field(30.0, gt=0, description="Package download timeout (s)")
    host: str = "0.0.0.0"
    port: int = Field(12316, gt=0, lt=65536)

    def resolve_url(self, relative_path: str) -> str:
        """Join a catalog-relative path onto the base URL."""
        return f"{self.base_url.rstrip('/')}/{relative_path.lstrip('/')}"

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


def load_settings(environ: Optional[Mapping[str, str]] = None) -> UpdaterSettings:
    """Build settings from defaults overlaid with ``BIOS_UPDATER_*`` variables.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated UpdaterSettings

    Raises:
        pydantic.ValidationError: If an override has an invalid value
    """
    environ = os.environ if environ is None else environ
    overrides = {
        name: environ[f"{ENV_PREFIX}{name.upper()}"]
        for name in UpdaterSettings.model_fields
        if f"{ENV_PREFIX}{name.upper()}" in environ
    }
    return UpdaterSettings(**overrides)
