from __future__ import annotations
import datetime as dt
from pydantic import BaseModel, ConfigDict, Field

from jobrole.models import Role, DayType


class CoverageRuleSchema(BaseModel):
    role: Role
    day_type: DayType
    min_staff: int
    model_config = ConfigDict(from_attributes=True)


# PUBLIC payload: insert or replace the rule for (role, day_type)
class CoverageRuleUpsertPayload(BaseModel):
    role: Role
    day_type: DayType
    min_staff: int = Field(..., ge=0)
    model_config = ConfigDict(extra="forbid")


# ---------- coverage report (read-only) ----------
class CoverageCellSchema(BaseModel):
    date: dt.date
    day_type: DayType
    role: Role
    count: int
    min: int
    ok: bool


class CoverageReportSchema(BaseModel):
    week_start: dt.date
    cells: list[CoverageCellSchema]
    gaps: list[CoverageCellSchema]
