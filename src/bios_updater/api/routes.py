"""API route handlers for BIOS updater endpoints."""

import logging

from fastapi import APIRouter, BackgroundTasks
from fastapi.responses import JSONResponse

from bios_updater.api.models import (
    CheckResponse,
    ErrorResponse,
    InstallRequest,
    ProgressResponse,
    SuccessResponse,
)
from bios_updater.config import load_settings
from bios_updater.errors import (
    NoCandidatePackageError,
    UnsupportedSystemError,
    UpdaterError,
)
from bios_updater.models.status import StageEnum
from bios_updater.services.state_manager import StateManager
from bios_updater.services.update import UpdateService

router = APIRouter(prefix="/api/v1.0")

logger = logging.getLogger("bios_updater.api")


def _error_response(error: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content=error.model_dump(mode="json", exclude_none=True),
    )


def _busy_response(state_manager: StateManager) -> JSONResponse:
    current_status = state_manager.get_status()
    return _error_response(
        ErrorResponse(
            code=409,
            msg=f"Operation already in progress: {current_status.stage.value}",
            stage=current_status.stage,
            progress=current_status.progress,
        )
    )


@router.get("/progress", response_model=ProgressResponse)
async def get_progress():
    """GET /api/v1.0/progress - Query current run status.

    Response format (success):
        {
            "code": 200,
            "msg": "success",
            "data": {
                "stage": "downloading",
                "progress": 45,
                "message": "Downloading Latitude_5X90_1.12.0.exe...",
                "error": null,
                "decision": {...}
            }
        }

    Response format (failed stage):
        {
            "code": 500,
            "msg": "Update failed: NETWORK_ERROR: HTTP 404 fetching ...",
            "data": {...},
            "stage": "failed",
            "progress": 0
        }
    """
    state_manager = StateManager()
    status = state_manager.get_status()

    if status.stage == StageEnum.FAILED:
        msg = f"Update failed: {status.error}" if status.error else "Update failed"
        return ProgressResponse(
            code=500,
            msg=msg,
            data=status,
            stage=status.stage,
            progress=status.progress,
        )
    return ProgressResponse(code=200, msg="success", data=status)


@router.post("/check", response_model=CheckResponse)
async def post_check():
    """POST /api/v1.0/check - Resolve whether a BIOS update is available.

    Runs the whole check synchronously and returns the decision.

    Returns:
        CheckResponse with the UpdateDecision, 409 if busy, 500 if the run
        aborted (identity, network, archive or document errors)
    """
    state_manager = StateManager()
    if state_manager.is_busy():
        return _busy_response(state_manager)

    try:
        decision = await UpdateService(settings=load_settings()).check()
    except UpdaterError as e:
        return _error_response(ErrorResponse(code=500, msg=str(e), stage=StageEnum.FAILED))
    except Exception as e:
        logger.error(f"Unexpected update check error: {e}", exc_info=True)
        return _error_response(
            ErrorResponse(code=500, msg=f"UNEXPECTED_ERROR: {e}", stage=StageEnum.FAILED)
        )

    return CheckResponse(code=200, msg=decision.message, data=decision)


@router.post("/install", response_model=SuccessResponse)
async def post_install(request: InstallRequest, background_tasks: BackgroundTasks):
    """POST /api/v1.0/install - Check, download and launch the BIOS package.

    Progress is reported through GET /progress.

    Args:
        request: InstallRequest with silent / auto_restart switches
        background_tasks: FastAPI background tasks

    Returns:
        SuccessResponse if the workflow starts, 409 if already in progress
    """
    state_manager = StateManager()
    if state_manager.is_busy():
        return _busy_response(state_manager)

    # Claim the run before the background task starts
    state_manager.update_status(
        stage=StageEnum.RESOLVING,
        progress=0,
        message="Install requested",
    )
    background_tasks.add_task(_install_workflow, request.silent, request.auto_restart)

    return JSONResponse(
        status_code=200,
        content={"code": 200, "msg": "success", "data": None},
    )


async def _install_workflow(silent: bool, auto_restart: bool) -> None:
    """Background task for install workflow."""
    state_manager = StateManager()
    try:
        await UpdateService(settings=load_settings()).install(
            silent=silent, auto_restart=auto_restart
        )
    except (UnsupportedSystemError, NoCandidatePackageError) as e:
        # Expected outcomes, already recorded as the run's decision
        logger.info(f"Install skipped: {e}")
        state_manager.update_status(
            stage=StageEnum.SUCCESS,
            progress=100,
            message=e.message,
        )
    except UpdaterError as e:
        # Status already set to failed by UpdateService
        logger.error(f"Install workflow failed: {e}")
    except Exception as e:
        logger.error(f"Unexpected install workflow error: {e}", exc_info=True)
        state_manager.update_status(
            stage=StageEnum.FAILED,
            progress=0,
            message="Install failed",
            error=f"INSTALL_FAILED: {str(e)}",
        )
