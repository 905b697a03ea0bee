"""Unit tests for StateManager."""

import pytest

from bios_updater.models.decision import UpdateDecision
from bios_updater.models.status import DecisionEnum, StageEnum
from bios_updater.services.state_manager import StateManager


@pytest.fixture(autouse=True)
def reset_singleton():
    StateManager._instance = None
    yield
    StateManager._instance = None


def _decision() -> UpdateDecision:
    return UpdateDecision(
        outcome=DecisionEnum.UP_TO_DATE,
        system_id="07A8",
        model="Latitude 5490",
        installed_version="1.12.0",
        candidate_version="1.12.0",
        message="BIOS is up to date",
    )


@pytest.mark.unit
class TestStateManager:
    """Test StateManager in isolation."""

    def test_singleton_pattern(self):
        assert StateManager() is StateManager()

    def test_initial_state(self):
        status = StateManager().get_status()

        assert status.stage == StageEnum.IDLE
        assert status.progress == 0
        assert status.message == "Updater ready"
        assert status.error is None
        assert status.decision is None

    def test_update_status(self):
        manager = StateManager()

        manager.update_status(
            stage=StageEnum.DOWNLOADING,
            progress=50,
            message="Downloading Latitude_5X90_1.12.0.exe...",
        )

        status = manager.get_status()
        assert status.stage == StageEnum.DOWNLOADING
        assert status.progress == 50
        assert status.error is None

    def test_update_status_with_error(self):
        manager = StateManager()

        manager.update_status(
            stage=StageEnum.FAILED,
            progress=0,
            message="Update check failed",
            error="NETWORK_ERROR: HTTP 404",
        )

        assert manager.get_status().error == "NETWORK_ERROR: HTTP 404"

    @pytest.mark.parametrize(
        "stage,busy",
        [
            (StageEnum.IDLE, False),
            (StageEnum.RESOLVING, True),
            (StageEnum.DOWNLOADING, True),
            (StageEnum.VERIFYING, True),
            (StageEnum.INSTALLING, True),
            (StageEnum.SUCCESS, False),
            (StageEnum.FAILED, False),
        ],
    )
    def test_is_busy(self, stage, busy):
        manager = StateManager()
        manager.update_status(stage=stage, progress=0, message="x")

        assert manager.is_busy() is busy

    def test_record_decision(self):
        manager = StateManager()
        decision = _decision()

        manager.record_decision(decision)

        assert manager.get_status().decision == decision

    def test_reset(self):
        manager = StateManager()
        manager.update_status(stage=StageEnum.FAILED, progress=0, message="x", error="e")
        manager.record_decision(_decision())

        manager.reset()

        status = manager.get_status()
        assert status.stage == StageEnum.IDLE
        assert status.error is None
        assert status.decision is None
