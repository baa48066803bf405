from pydantic import BaseModel, field_validator

from common.models.cancellations import CancellationType


class CancellationRequest(BaseModel):
    cancellation_type: CancellationType
    reason: str

    @field_validator("cancellation_type", mode="before")
    @classmethod
    def require_type(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Please select a cancellation type")
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("reason")
    @classmethod
    def require_reason(cls, v: str):
        if not v.strip():
            raise ValueError("Please provide a reason for cancellation")
        return v.strip()
