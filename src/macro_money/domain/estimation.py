"""Models for remote estimation results."""

from pydantic import BaseModel, Field


class RemoteEstimate(BaseModel):
    """Validated payload returned by the remote estimation service."""

    calories: float = Field(ge=0, allow_inf_nan=False)
    protein: float = Field(ge=0, allow_inf_nan=False)
    cost: float = Field(ge=0, allow_inf_nan=False)


class RemoteError(BaseModel):
    """Error payload returned by the remote estimation service."""

    error: str
