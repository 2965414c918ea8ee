from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from jobrole.models import Role, DayType
from .schema import CoverageRuleSchema, CoverageRuleUpsertPayload
from . import service

rule_router = APIRouter(prefix="/rules", tags=["Coverage Rules"])

# List all rules
@rule_router.get("", response_model=list[CoverageRuleSchema])
def list_rules(db: Session = Depends(get_db)):
    return service.get_rules(db)

# Insert or replace the rule for (role, day_type)
@rule_router.post("", response_model=CoverageRuleSchema)
def upsert_rule(payload: CoverageRuleUpsertPayload, db: Session = Depends(get_db)):
    try:
        return service.upsert_rule(db, payload)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="coverage rule could not be saved")

# Delete a rule; the minimum falls back to 0
@rule_router.delete("/{role}/{day_type}")
def delete_rule(role: Role, day_type: DayType, db: Session = Depends(get_db)):
    if not service.delete_rule(db, role, day_type):
        raise HTTPException(status_code=404, detail="coverage rule not found")
    return {"message": "coverage rule deleted"}
