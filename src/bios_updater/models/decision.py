"""Update decision model."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from bios_updater.models.catalog import PackageCandidate
from bios_updater.models.status import DecisionEnum


class UpdateDecision(BaseModel):
    """Outcome of resolving the catalog against the local machine.

    Example:
        {
            "outcome": "updateAvailable",
            "system_id": "07A8",
            "model": "Latitude 5490",
            "installed_version": "1.10.0",
            "candidate_version": "1.12.0",
            "manifest_path": "FOLDER05150016M/1/Latitude_07A8.cab",
            "message": "BIOS update available: 1.10.0 -> 1.12.0"
        }
    """

    model_config = ConfigDict(frozen=True)

    outcome: DecisionEnum = Field(..., description="Terminal decision state")
    system_id: str = Field(..., description="Resolved system identifier")
    model: str = Field(..., description="Vendor model string")
    installed_version: str = Field(..., description="Installed BIOS version (raw)")
    candidate_version: Optional[str] = Field(None, description="Catalog BIOS version (raw)")
    manifest_path: Optional[str] = Field(None, description="Model manifest path")
    package: Optional[PackageCandidate] = Field(None, description="Selected BIOS package")
    reason: Optional[str] = Field(
        None, description="Error code when indeterminate (e.g., NO_CANDIDATE_PACKAGE)"
    )
    message: str = Field(..., description="Single user-facing status message")

    @property
    def update_available(self) -> bool:
        return self.outcome == DecisionEnum.UPDATE_AVAILABLE
