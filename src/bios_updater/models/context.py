"""Immutable per-run context threaded through the resolution pipeline."""

from pydantic import BaseModel, ConfigDict, Field

from bios_updater.config import UpdaterSettings
from bios_updater.models.identity import SystemIdentity, extract_model_token


class RunContext(BaseModel):
    """Everything derived once at the start of a run."""

    model_config = ConfigDict(frozen=True)

    identity: SystemIdentity
    model_token: str = Field("", description="Short model code, empty if none")
    settings: UpdaterSettings = Field(default_factory=UpdaterSettings)

    @classmethod
    def create(cls, identity: SystemIdentity, settings: UpdaterSettings) -> "RunContext":
        return cls(
            identity=identity,
            model_token=extract_model_token(identity.model),
            settings=settings,
        )
