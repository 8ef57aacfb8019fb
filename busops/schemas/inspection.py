from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from busops.schemas.time import WorkSessionRecord


class InspectionCreate(BaseModel):
    driver_id: str
    vehicle_id: str
    inspection_type: Literal["pre", "post"]
    driver_name: str | None = None
    driver_license_number: str | None = None
    vehicle_label: str | None = None
    shift: str | None = None
    answers: dict[str, Any] = Field(default_factory=dict)
    overall_status: str | None = None
    notes: str | None = None
    signature_name: str | None = None
    odometer_reading: int | None = Field(default=None, ge=0)

    @field_validator("driver_id", "vehicle_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class InspectionSummary(BaseModel):
    id: str
    driver_id: str
    driver_name: str | None = None
    vehicle_id: str
    vehicle_label: str | None = None
    inspection_type: str
    shift: str | None = None
    overall_status: str | None = None
    inspection_date: str
    submitted_at: str

    model_config = {"from_attributes": True}


class InspectionResponse(InspectionSummary):
    driver_license_number: str | None = None
    answers: dict[str, Any] = Field(default_factory=dict)
    notes: str | None = None
    signature_name: str | None = None
    odometer_reading: int | None = None


class InspectionResult(BaseModel):
    inspection: InspectionResponse
    session: WorkSessionRecord | None = None
    session_action: Literal["opened", "already_open", "closed"]
