from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from jobrole.models import Role
from .models import EmployeeStatus


class EmployeeSchema(BaseModel):
    id: int
    name: str
    role: Role
    preferred_start: Optional[str] = None
    status: EmployeeStatus = EmployeeStatus.active
    model_config = ConfigDict(from_attributes=True)

# PUBLIC payload, what clients send
class EmployeeCreatePayload(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    role: Role
    preferred_start: Optional[str] = Field(None, max_length=32)
    model_config = ConfigDict(extra="forbid")


# INTERNAL DTO for the service
class EmployeeCreate(BaseModel):
    name: str
    role: Role
    preferred_start: Optional[str] = None
    status: EmployeeStatus = EmployeeStatus.active

class EmployeeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[Role] = None
    preferred_start: Optional[str] = Field(None, max_length=32)
    status: Optional[EmployeeStatus] = None
    model_config = ConfigDict(extra="forbid")
