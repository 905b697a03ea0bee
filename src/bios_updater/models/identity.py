"""Hardware identity models and system identifier resolution."""

import logging
import re
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from bios_updater.errors import UnresolvableIdentityError

logger = logging.getLogger("bios_updater.identity")

MODEL_TOKEN_PATTERN = re.compile(r"[A-Z]?[0-9]{4}[A-Za-z]?")

# Vendor convention: the second OEM string holds the system id, e.g. "[07A8]"
OEM_SYSTEM_ID_INDEX = 1


class RawHardwareIdentity(BaseModel):
    """Identity fields as read from the machine, before resolution."""

    model: str = Field(..., description="Vendor model string (e.g., 'Latitude 5490')")
    sku_number: Optional[str] = Field(None, description="SMBIOS SKU number, if any")
    oem_strings: list[str] = Field(default_factory=list, description="SMBIOS OEM strings")
    installed_bios_version: str = Field(..., description="Installed BIOS version string")


class SystemIdentity(BaseModel):
    """Resolved identity of the local machine, derived once per run."""

    model_config = ConfigDict(frozen=True)

    model: str
    raw_sku_number: Optional[str] = None
    oem_strings: tuple[str, ...] = ()
    system_id: str
    installed_version_raw: str

    @classmethod
    def from_raw(cls, raw: RawHardwareIdentity) -> "SystemIdentity":
        """Resolve the system id and freeze the identity.

        Raises:
            UnresolvableIdentityError: If neither SKU nor OEM strings yield an id
        """
        system_id = resolve_system_id(raw.sku_number, raw.oem_strings)
        return cls(
            model=raw.model,
            raw_sku_number=raw.sku_number,
            oem_strings=tuple(raw.oem_strings),
            system_id=system_id,
            installed_version_raw=raw.installed_bios_version,
        )


def resolve_system_id(sku_number: Optional[str], oem_strings: Sequence[str]) -> str:
    """Derive the vendor system identifier.

    The SKU number is authoritative when present. Otherwise the identifier is
    the text between the first ``[`` and the following ``]`` of the second
    OEM string.

    Args:
        sku_number: SMBIOS SKU number, None or blank when missing
        oem_strings: SMBIOS OEM strings in table order

    Returns:
        System identifier (e.g., "07A8")

    Raises:
        UnresolvableIdentityError: If no identifier can be derived
    """
    if sku_number is not None and sku_number.strip():
        return sku_number

    if len(oem_strings) <= OEM_SYSTEM_ID_INDEX:
        raise UnresolvableIdentityError(
            f"No SKU number and only {len(oem_strings)} OEM string(s) available"
        )

    oem = oem_strings[OEM_SYSTEM_ID_INDEX]
    start = oem.find("[")
    end = oem.find("]", start + 1) if start != -1 else -1
    if start == -1 or end == -1:
        raise UnresolvableIdentityError(f"OEM string {oem!r} has no bracketed system id")

    system_id = oem[start + 1:end]
    logger.debug(f"Resolved system id {system_id!r} from OEM string {oem!r}")
    return system_id


def extract_model_token(model: str) -> str:
    """Extract the short model code from a verbose model string.

    ``"Latitude 7490"`` -> ``"7490"``, ``"Latitude E7470"`` -> ``"E7470"``.

    Returns:
        First match, or an empty string when the model has no token. An empty
        token matches no catalog entry.
    """
    matches = MODEL_TOKEN_PATTERN.findall(model or "")
    if not matches:
        logger.warning(f"No model token found in {model!r}")
        return ""
    if len(matches) > 1:
        logger.warning(f"Multiple model tokens in {model!r}: {matches}, using {matches[0]!r}")
    return matches[0]
