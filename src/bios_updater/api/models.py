"""Pydantic models for HTTP API requests and responses."""

from typing import Optional
from pydantic import BaseModel, Field

from bios_updater.models.decision import UpdateDecision
from bios_updater.models.status import StageEnum


class InstallRequest(BaseModel):
    """POST /api/v1.0/install payload.

    Triggers check, download and elevated launch of the BIOS package.

    Example:
        {
            "silent": true,
            "auto_restart": false
        }
    """

    silent: bool = Field(True, description="Run the vendor package without UI (/s)")
    auto_restart: bool = Field(
        False, description="Let the package restart the machine when done (/r)"
    )


class ProgressData(BaseModel):
    """Progress data nested in response."""

    stage: StageEnum = Field(..., description="Current lifecycle stage")
    progress: int = Field(..., ge=0, le=100, description="Percentage completion (0-100)")
    message: str = Field(..., description="Human-readable status description")
    error: Optional[str] = Field(
        None, description="Error code and message if stage == failed"
    )
    decision: Optional[UpdateDecision] = Field(
        None, description="Latest update decision, if a check has completed"
    )


class ProgressResponse(BaseModel):
    """GET /api/v1.0/progress response.

    Returns current status state with application-level status code.
    """

    code: int = Field(..., description="Application-level status code (200/500)")
    msg: str = Field(..., description="Status message or error description")
    data: ProgressData = Field(..., description="Progress data")
    stage: Optional[StageEnum] = Field(
        None, description="Current stage (for failed responses at root level)"
    )
    progress: Optional[int] = Field(
        None, description="Current progress (for failed responses at root level)"
    )


class CheckResponse(BaseModel):
    """POST /api/v1.0/check response."""

    code: int = Field(default=200, description="Application-level status code")
    msg: str = Field(..., description="Decision message")
    data: UpdateDecision = Field(..., description="Update decision")


class SuccessResponse(BaseModel):
    """Success response for command endpoints.

    Used by POST /install when the operation starts successfully.
    """

    code: int = Field(default=200, description="Application-level status code (200)")
    msg: str = Field(default="success", description="Success message")
    data: Optional[dict] = Field(None, description="Optional response data")


class ErrorResponse(BaseModel):
    """Error response for all endpoints.

    HTTP status code is always 200, real status in 'code' field.
    """

    code: int = Field(..., description="Application-level error code (409/500)")
    msg: str = Field(..., description="Error message with error code prefix")
    stage: Optional[StageEnum] = Field(
        None, description="Current stage (for operation state errors)"
    )
    progress: Optional[int] = Field(
        None, description="Current progress (for operation state errors)"
    )
