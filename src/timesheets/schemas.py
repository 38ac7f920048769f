"""Request/response schemas for the JSON API."""

from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel, ConfigDict, Field, model_validator

from timesheets.db.models import DEFAULT_HOUR_THRESHOLD, TimesheetType
from timesheets.services.timesheet_service import MAX_HOURS, MIN_HOURS


class LoginRequest(BaseModel):
    access_code: str = Field(..., max_length=200)


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    full_name: str
    is_admin: bool
    is_active: bool
    created_at: dt.datetime


class LoginResponse(BaseModel):
    user: UserRead


class MessageResponse(BaseModel):
    message: str


class UserCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    access_code: str | None = Field(None, max_length=200)
    is_admin: bool = False


class UserUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=200)
    is_active: bool | None = None


class WorkPhaseCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=500)
    category: str = Field(..., min_length=1, max_length=100)
    hour_threshold: int = Field(DEFAULT_HOUR_THRESHOLD, ge=0)


class WorkPhaseUpdate(BaseModel):
    code: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, min_length=1, max_length=500)
    category: str | None = Field(None, min_length=1, max_length=100)
    hour_threshold: int | None = Field(None, ge=0)


class WorkPhaseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    description: str
    category: str
    hour_threshold: int
    created_at: dt.datetime


class TimesheetCreate(BaseModel):
    # Accepted for compatibility with clients that echo the owner; must match the session.
    user_id: uuid.UUID | None = None
    date: dt.date
    type: TimesheetType
    work_phase_id: int | None = None
    hours: int | None = None

    @model_validator(mode="after")
    def _check_worked_hours(self) -> TimesheetCreate:
        # Leave days are stored as a full day, so their hours are not checked.
        if self.type == TimesheetType.worked and self.hours is not None:
            if not MIN_HOURS <= self.hours <= MAX_HOURS:
                raise ValueError(f"Hours must be between {MIN_HOURS} and {MAX_HOURS}")
        return self


class TimesheetUpdate(BaseModel):
    date: dt.date | None = None
    type: TimesheetType | None = None
    work_phase_id: int | None = None
    # Range checked against the merged entry when the update is applied.
    hours: int | None = None


class TimesheetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: uuid.UUID
    date: dt.date
    type: TimesheetType
    work_phase_id: int | None
    hours: int
    created_at: dt.datetime
    updated_at: dt.datetime


class PhaseHours(BaseModel):
    phase_id: int
    phase: WorkPhaseRead
    hours: int
    over_threshold: bool


class EmployeeHours(BaseModel):
    user: UserRead
    total_hours: int
    phases: list[PhaseHours]


class AdminStats(BaseModel):
    total_employees: int
    active_today: int
    total_hours_this_month: int
    phases_count: int
