from __future__ import annotations
import csv
import io
import logging
import random
import threading
import weakref
from datetime import date, timedelta
from typing import Optional, List

from fastapi import HTTPException
from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from core.config_loader import settings
from staffing import service as staffing_service
from employee import service as employee_service
from employee.models import Employee
from jobrole.models import role_label
from staffrequest import service as request_service
from .models import ScheduleEntry, EntryStatus
from .schema import ScheduleEntryUpdatePayload
from . import generator

logger = logging.getLogger(__name__)

DAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# one lock per week start while someone holds it; runs for the same week are serialised
_week_locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()
_week_locks_guard = threading.Lock()


# ---------- helpers ----------

def _week_lock(week_start: date) -> threading.Lock:
    with _week_locks_guard:
        return _week_locks.setdefault(week_start, threading.Lock())

def _ensure_week_start(week_start: date) -> None:
    if not generator.is_week_start(week_start):
        raise HTTPException(status_code=422, detail="week_start must be a Monday")

def _week_end(week_start: date) -> date:
    return week_start + timedelta(days=generator.WEEK_LENGTH - 1)

def _weekend_offsets() -> list[int]:
    return settings.WEEKEND_OFFSETS


# ---------- queries ----------

def get_week_entries(db: Session, week_start: date) -> List[ScheduleEntry]:
    stmt = (
        select(ScheduleEntry)
        .join(Employee, Employee.id == ScheduleEntry.employee_id)
        .where(ScheduleEntry.date >= week_start, ScheduleEntry.date <= _week_end(week_start))
        .order_by(Employee.role.asc(), Employee.name.asc(), ScheduleEntry.employee_id.asc(), ScheduleEntry.date.asc())
    )
    return list(db.scalars(stmt).unique())

def get_entry(db: Session, employee_id: int, day: date) -> Optional[ScheduleEntry]:
    stmt = select(ScheduleEntry).where(ScheduleEntry.employee_id == employee_id, ScheduleEntry.date == day)
    return db.scalars(stmt).first()


# ---------- generation ----------

def generate_schedule(
    db: Session,
    week_start: date,
    *,
    rng: Optional[random.Random] = None,
    dry_run: bool = False,
) -> dict:
    """
    Rebuild every schedule entry of the week starting on `week_start`.
    - requests first, then weekend coverage, weekday coverage, LIBRE for the rest
    - the delete of the old week and the insert of the new one commit together
    - dry_run plans the week and reports without writing
    """
    _ensure_week_start(week_start)
    week_end = _week_end(week_start)

    with _week_lock(week_start):
        employees = employee_service.get_active_employees(db)
        rules = staffing_service.get_rules(db)
        requests = request_service.get_requests_in_range(db, week_start, week_end)

        plan = generator.plan_week(
            week_start,
            employees=employees,
            rules=rules,
            requests=requests,
            rng=rng,
            weekend_offsets=_weekend_offsets(),
            default_shift_start=settings.DEFAULT_SHIFT_START,
        )

        result = {
            "week_start": week_start,
            "created": len(plan.entries),
            "replaced": 0,
            "dry_run": dry_run,
            "shortfalls": [
                {"date": s.date, "role": s.role, "needed": s.needed, "filled": s.filled}
                for s in plan.shortfalls
            ],
        }
        if dry_run:
            return result

        try:
            res = db.execute(
                delete(ScheduleEntry).where(
                    ScheduleEntry.date >= week_start,
                    ScheduleEntry.date <= week_end,
                )
            )
            result["replaced"] = res.rowcount or 0
            db.add_all([
                ScheduleEntry(
                    employee_id=e.employee_id,
                    date=e.date,
                    status=e.status,
                    shift_start=e.shift_start,
                )
                for e in plan.entries
            ])
            db.commit()
        except Exception:
            db.rollback()
            raise

    logger.info(
        "generated week %s: %d entries for %d employees, %d replaced, %d coverage gaps",
        week_start.isoformat(), result["created"], len(employees), result["replaced"], len(plan.shortfalls),
    )
    return result


# ---------- single-cell edit ----------

def upsert_entry(db: Session, payload: ScheduleEntryUpdatePayload) -> ScheduleEntry:
    emp = db.get(Employee, payload.employee_id)
    if not emp:
        raise HTTPException(status_code=404, detail="employee not found")

    if payload.status == EntryStatus.working:
        shift_start = payload.shift_start or emp.preferred_start or settings.DEFAULT_SHIFT_START
    else:
        shift_start = None

    row = get_entry(db, payload.employee_id, payload.date)
    if row is None:
        row = ScheduleEntry(employee_id=payload.employee_id, date=payload.date)
        db.add(row)
    row.status = payload.status
    row.shift_start = shift_start
    db.commit()
    db.refresh(row)
    return row


# ---------- reports ----------

def coverage_report(db: Session, week_start: date) -> dict:
    entries = get_week_entries(db, week_start)
    rules = staffing_service.get_rules(db)
    cells = generator.evaluate_coverage(
        entries,
        rules,
        generator.week_dates(week_start),
        generator.day_type_for(week_start, _weekend_offsets()),
    )
    rows = [
        {"date": c.date, "day_type": c.day_type, "role": c.role, "count": c.count, "min": c.min, "ok": c.ok}
        for c in cells.values()
    ]
    return {"week_start": week_start, "cells": rows, "gaps": [r for r in rows if not r["ok"]]}

def fairness_report(db: Session, week_start: date) -> List[dict]:
    """Weekend working days per employee, busiest first."""
    weekend, _ = generator.split_week(week_start, _weekend_offsets())
    weekend_set = set(weekend)
    per_employee: dict[int, int] = {}
    for e in get_week_entries(db, week_start):
        if e.status == EntryStatus.working and e.date in weekend_set:
            per_employee[e.employee_id] = per_employee.get(e.employee_id, 0) + 1

    rows = []
    for emp in employee_service.get_employees(db):
        shifts = per_employee.get(emp.id, 0)
        label = None
        if weekend and shifts == len(weekend):
            label = "High Load"
        elif shifts == 0:
            label = "Resting"
        rows.append({"id": emp.id, "name": emp.name, "role": emp.role, "weekend_shifts": shifts, "label": label})
    rows.sort(key=lambda r: -r["weekend_shifts"])
    return rows

def _cell_text(entry: Optional[ScheduleEntry]) -> str:
    if entry is None:
        return EntryStatus.libre.value
    if entry.status == EntryStatus.working:
        return entry.shift_start or settings.DEFAULT_SHIFT_START
    return entry.status.value

def export_week_csv(db: Session, week_start: date) -> str:
    dates = generator.week_dates(week_start)
    by_slot = {(e.employee_id, e.date): e for e in get_week_entries(db, week_start)}

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["Name", "Role", *DAY_LABELS, "Total Days"])
    for emp in employee_service.get_employees(db):
        cells = [by_slot.get((emp.id, d)) for d in dates]
        worked = sum(1 for c in cells if c is not None and c.status == EntryStatus.working)
        writer.writerow([emp.name, role_label(emp.role), *[_cell_text(c) for c in cells], worked])
    return buf.getvalue()
