from __future__ import annotations
from sqlalchemy import Integer, Enum as SAEnum, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from core.database import Base
from jobrole.models import Role, DayType

class CoverageRule(Base):
    __tablename__ = "coverage_rules"

    # composite PK: at most one rule per (role, day_type)
    role: Mapped[Role] = mapped_column(SAEnum(Role, name="role_code", native_enum=False), primary_key=True)
    day_type: Mapped[DayType] = mapped_column(SAEnum(DayType, name="day_type", native_enum=False), primary_key=True)

    min_staff: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("min_staff >= 0", name="ck_coverage_rule_min_staff"),
    )
