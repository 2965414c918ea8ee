from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from jobrole.models import Role
from .models import EntryStatus


class ScheduleEntrySchema(BaseModel):
    id: int
    employee_id: int
    date: dt.date
    status: EntryStatus
    shift_start: Optional[str] = None
    name: Optional[str] = None
    role: Optional[Role] = None
    model_config = ConfigDict(from_attributes=True)


# PUBLIC payload: edit one (employee, date) cell
class ScheduleEntryUpdatePayload(BaseModel):
    employee_id: int
    date: dt.date
    status: EntryStatus
    shift_start: Optional[str] = Field(None, max_length=32)
    model_config = ConfigDict(extra="forbid")


class GeneratePayload(BaseModel):
    week_start: dt.date = Field(..., description="Monday the week starts on")
    random_seed: Optional[int] = Field(None, description="Pin the random picks; omit for a fresh draw")
    dry_run: bool = False
    model_config = ConfigDict(extra="forbid")


class ShortfallSchema(BaseModel):
    date: dt.date
    role: Role
    needed: int
    filled: int


class GenerateResponse(BaseModel):
    week_start: dt.date
    created: int
    replaced: int
    dry_run: bool
    shortfalls: list[ShortfallSchema]


class FairnessRowSchema(BaseModel):
    id: int
    name: str
    role: Role
    weekend_shifts: int
    label: Optional[str] = None
