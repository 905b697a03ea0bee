"""Status enums for the BIOS updater."""

from enum import Enum


class StageEnum(str, Enum):
    """Run lifecycle stages.

    State transitions:
    idle → resolving → downloading → verifying → installing → success
               ↓            ↓            ↓            ↓
             failed ←──────────────────────────────────
    """

    IDLE = "idle"
    RESOLVING = "resolving"
    DOWNLOADING = "downloading"
    VERIFYING = "verifying"
    INSTALLING = "installing"
    SUCCESS = "success"
    FAILED = "failed"


class DecisionEnum(str, Enum):
    """Terminal outcome of an update check."""

    UP_TO_DATE = "upToDate"
    UPDATE_AVAILABLE = "updateAvailable"
    UNSUPPORTED = "unsupported"
    INDETERMINATE = "indeterminate"
