"""In-memory status of the current updater run."""

import logging
from typing import Optional

from bios_updater.api.models import ProgressData
from bios_updater.models.decision import UpdateDecision
from bios_updater.models.status import StageEnum


class StateManager:
    """Singleton holding the run status for GET /progress.

    Nothing is persisted: every run re-fetches and re-derives everything.
    """

    _instance: Optional["StateManager"] = None

    def __new__(cls):
        """Implement singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize state manager (only once due to singleton)."""
        if self._initialized:
            return

        self.logger = logging.getLogger("bios_updater.state_manager")

        self._current_stage: StageEnum = StageEnum.IDLE
        self._current_progress: int = 0
        self._current_message: str = "Updater ready"
        self._current_error: Optional[str] = None
        self._last_decision: Optional[UpdateDecision] = None

        self._initialized = True
        self.logger.info("StateManager initialized")

    def get_status(self) -> ProgressData:
        """Get current status for GET /progress endpoint."""
        return ProgressData(
            stage=self._current_stage,
            progress=self._current_progress,
            message=self._current_message,
            error=self._current_error,
            decision=self._last_decision,
        )

    def update_status(
        self,
        stage: StageEnum,
        progress: int,
        message: str,
        error: Optional[str] = None,
    ) -> None:
        """Update in-memory status state.

        Args:
            stage: Current lifecycle stage
            progress: Percentage completion (0-100)
            message: Human-readable description
            error: Error code and message if stage == failed
        """
        self._current_stage = stage
        self._current_progress = progress
        self._current_message = message
        self._current_error = error
        self.logger.debug(
            f"Status updated: stage={stage.value}, progress={progress}%, message={message}"
        )

    def is_busy(self) -> bool:
        """True while a run is between idle and a terminal stage."""
        return self._current_stage not in (StageEnum.IDLE, StageEnum.SUCCESS, StageEnum.FAILED)

    def record_decision(self, decision: UpdateDecision) -> None:
        """Remember the latest update decision."""
        self._last_decision = decision
        self.logger.debug(f"Recorded decision: {decision.outcome.value}")

    def reset(self) -> None:
        """Reset to idle state."""
        self._current_stage = StageEnum.IDLE
        self._current_progress = 0
        self._current_message = "Updater ready"
        self._current_error = None
        self._last_decision = None
        self.logger.info("State reset to idle")
