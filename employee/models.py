from __future__ import annotations
from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Enum as SAEnum
from core.database import Base
from jobrole.models import Role


class EmployeeStatus(str, Enum):
    active = "active"
    vacation = "vacation"


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(SAEnum(Role, name="role_code", native_enum=False), nullable=False, index=True)

    # free-form display string, e.g. "5 PM"
    preferred_start: Mapped[str | None] = mapped_column(String(32), nullable=True)

    status: Mapped[EmployeeStatus] = mapped_column(
        SAEnum(EmployeeStatus, name="employee_status", native_enum=False),
        default=EmployeeStatus.active,
        nullable=False,
    )

    # relationships
    requests = relationship("StaffRequest", back_populates="employee", cascade="all, delete-orphan")
    schedule_entries = relationship("ScheduleEntry", back_populates="employee", cascade="all, delete-orphan")
