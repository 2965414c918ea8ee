from __future__ import annotations
import logging
from typing import Optional, List

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from jobrole.models import Role, DayType
from .models import CoverageRule
from .schema import CoverageRuleUpsertPayload

logger = logging.getLogger(__name__)

# (role, weekday min, weekend min)
DEFAULT_RULES: list[tuple[Role, int, int]] = [
    (Role.WAIT, 10, 13),
    (Role.BRUN, 3, 4),
    (Role.KRUN, 4, 5),
    (Role.BART, 4, 4),
    (Role.HOST, 2, 2),
    (Role.MGR, 1, 2),
]

def get_rules(db: Session) -> List[CoverageRule]:
    stmt = select(CoverageRule).order_by(CoverageRule.role.asc(), CoverageRule.day_type.asc())
    return list(db.scalars(stmt))

def get_rule(db: Session, role: Role, day_type: DayType) -> Optional[CoverageRule]:
    return db.get(CoverageRule, (role, day_type))

def upsert_rule(db: Session, payload: CoverageRuleUpsertPayload) -> CoverageRule:
    # merge() resolves the composite PK: update when present, insert otherwise
    row = db.merge(CoverageRule(role=payload.role, day_type=payload.day_type, min_staff=payload.min_staff))
    db.commit()
    db.refresh(row)
    return row

def delete_rule(db: Session, role: Role, day_type: DayType) -> bool:
    row = db.get(CoverageRule, (role, day_type))
    if not row:
        return False
    db.delete(row)
    db.commit()
    return True

def seed_default_rules(db: Session) -> int:
    """Insert the default staffing minimums when no rule exists yet."""
    if db.scalar(select(func.count()).select_from(CoverageRule)):
        return 0
    rows = []
    for role, weekday_min, weekend_min in DEFAULT_RULES:
        rows.append(CoverageRule(role=role, day_type=DayType.weekday, min_staff=weekday_min))
        rows.append(CoverageRule(role=role, day_type=DayType.weekend, min_staff=weekend_min))
    db.add_all(rows)
    db.commit()
    logger.info("seeded %d default coverage rules", len(rows))
    return len(rows)
