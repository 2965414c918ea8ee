from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from jobrole.models import Role
from .models import RequestType


class StaffRequestSchema(BaseModel):
    id: int
    employee_id: int
    date: dt.date
    type: RequestType
    name: Optional[str] = None
    role: Optional[Role] = None
    model_config = ConfigDict(from_attributes=True)


# PUBLIC payload (what clients send)
class StaffRequestCreatePayload(BaseModel):
    employee_id: int
    date: dt.date = Field(..., description="ISO date; for VACATION any day of the target week")
    type: RequestType
    model_config = ConfigDict(extra="forbid")


# INTERNAL DTO for the service
class StaffRequestCreate(BaseModel):
    employee_id: int
    date: dt.date
    type: RequestType
