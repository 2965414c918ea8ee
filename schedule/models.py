from __future__ import annotations
import datetime as dt
from enum import Enum
from sqlalchemy import Date, String, ForeignKey, Index, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from core.database import Base


class EntryStatus(str, Enum):
    working = "working"
    libre = "LIBRE"
    vacation = "VACATION"
    unavailable = "-"


class ScheduleEntry(Base):
    __tablename__ = "schedule_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"), index=True)
    date: Mapped[dt.date] = mapped_column(Date(), nullable=False)

    status: Mapped[EntryStatus] = mapped_column(
        SAEnum(EntryStatus, name="entry_status", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    # only set while status == working
    shift_start: Mapped[str | None] = mapped_column(String(32), nullable=True)

    employee = relationship("Employee", back_populates="schedule_entries", lazy="joined")

    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_schedule_entry_employee_date"),
        Index("ix_schedule_entries_date", "date"),
    )

    @property
    def name(self) -> str | None:
        return self.employee.name if self.employee else None

    @property
    def role(self):
        return self.employee.role if self.employee else None
