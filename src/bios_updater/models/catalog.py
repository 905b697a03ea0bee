"""Data models for the vendor catalog index and per-model manifests."""

from enum import Enum
from pathlib import PurePosixPath
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ComponentType(str, Enum):
    """SoftwareComponent/ComponentType/@value in a model manifest."""

    BIOS = "BIOS"
    DRIVER = "DRVR"
    FIRMWARE = "FRMW"
    APPLICATION = "APAC"
    UTILITY = "UTIL"
    OTHER = "OTHER"

    @classmethod
    def _missing_(cls, value):
        return cls.OTHER


class CatalogIndexEntry(BaseModel):
    """One GroupManifest of the root catalog: a model family and its manifest."""

    model_config = ConfigDict(frozen=True)

    system_ids: frozenset[str] = Field(..., description="Supported system ids")
    manifest_path: str = Field(..., description="Manifest cabinet path relative to base URL")


class PackageCandidate(BaseModel):
    """One SoftwareComponent of a model manifest."""

    model_config = ConfigDict(frozen=True)

    component_type: ComponentType
    name: str = ""
    supported_device_displays: tuple[str, ...] = ()
    supported_model_displays: tuple[str, ...] = ()
    version_raw: str = Field(..., description="dellVersion attribute")
    download_path: str = Field(..., description="Package path relative to base URL")
    hash_md5: Optional[str] = Field(None, description="hashMD5 attribute, lowercase hex")
    release_date: Optional[str] = None
    size: Optional[int] = Field(None, ge=0)

    @field_validator("download_path")
    @classmethod
    def no_directory_traversal(cls, v: str) -> str:
        """Prevent directory traversal in catalog paths."""
        if ".." in PurePosixPath(v.replace("\\", "/")).parts:
            raise ValueError("Package path must not contain a '..' segment")
        return v

    @field_validator("hash_md5")
    @classmethod
    def normalize_md5(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else None

    @property
    def file_name(self) -> str:
        return self.download_path.rsplit("/", 1)[-1]
