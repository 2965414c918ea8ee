from __future__ import annotations
import random
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from staffing.schema import CoverageReportSchema

from .schema import (
    ScheduleEntrySchema,
    ScheduleEntryUpdatePayload,
    GeneratePayload,
    GenerateResponse,
    FairnessRowSchema,
)
from . import service

schedule_router = APIRouter(prefix="/schedule", tags=["Schedule"])

# Rebuild a week from requests, coverage rules and LIBRE defaults
@schedule_router.post("/generate", response_model=GenerateResponse)
def generate(payload: GeneratePayload, db: Session = Depends(get_db)):
    rng = random.Random(payload.random_seed) if payload.random_seed is not None else None
    return service.generate_schedule(db, payload.week_start, rng=rng, dry_run=payload.dry_run)

# Edit a single (employee, date) cell
@schedule_router.post("/update", response_model=ScheduleEntrySchema)
def update_entry(payload: ScheduleEntryUpdatePayload, db: Session = Depends(get_db)):
    try:
        return service.upsert_entry(db, payload)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="schedule entry was changed concurrently")

# Entries of the week starting on week_start
@schedule_router.get("/{week_start}", response_model=list[ScheduleEntrySchema])
def get_week(week_start: date, db: Session = Depends(get_db)):
    return service.get_week_entries(db, week_start)

@schedule_router.get("/{week_start}/coverage", response_model=CoverageReportSchema)
def get_coverage(week_start: date, db: Session = Depends(get_db)):
    return service.coverage_report(db, week_start)

@schedule_router.get("/{week_start}/fairness", response_model=list[FairnessRowSchema])
def get_fairness(week_start: date, db: Session = Depends(get_db)):
    return service.fairness_report(db, week_start)

@schedule_router.get("/{week_start}/export.csv")
def export_csv(week_start: date, db: Session = Depends(get_db)):
    body = service.export_week_csv(db, week_start)
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="schedule_{week_start.isoformat()}.csv"'},
    )
