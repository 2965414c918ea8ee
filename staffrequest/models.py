from __future__ import annotations
import datetime as dt
from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Date, ForeignKey, Index, Enum as SAEnum
from core.database import Base


class RequestType(str, Enum):
    libre = "LIBRE"
    unavailable = "unavailable"
    vacation = "VACATION"


class StaffRequest(Base):
    __tablename__ = "requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), index=True
    )
    # VACATION covers the whole week containing this date
    date: Mapped[dt.date] = mapped_column(Date(), nullable=False)
    type: Mapped[RequestType] = mapped_column(
        SAEnum(RequestType, name="request_type", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    employee = relationship("Employee", back_populates="requests", lazy="joined")

    # no uniqueness: repeated requests for one slot are all applied
    __table_args__ = (
        Index("ix_requests_date", "date"),
    )

    @property
    def name(self) -> str | None:
        return self.employee.name if self.employee else None

    @property
    def role(self):
        return self.employee.role if self.employee else None
