from __future__ import annotations
from datetime import date
from typing import Optional, List

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import StaffRequest
from .schema import StaffRequestCreate
from employee.models import Employee


# -------- helpers --------

def _ensure_employee_exists(db: Session, employee_id: int) -> None:
    if not db.get(Employee, employee_id):
        raise HTTPException(status_code=404, detail="employee not found")


# -------- queries --------

def get_request(db: Session, request_id: int) -> StaffRequest | None:
    return db.get(StaffRequest, request_id)


def get_requests(
    db: Session,
    *,
    employee_id: Optional[int] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[StaffRequest]:
    """List requests joined with the employee, optionally filtered by employee and inclusive date range."""
    stmt = select(StaffRequest).join(Employee, Employee.id == StaffRequest.employee_id)
    if employee_id is not None:
        stmt = stmt.where(StaffRequest.employee_id == employee_id)
    if start is not None:
        stmt = stmt.where(StaffRequest.date >= start)
    if end is not None:
        stmt = stmt.where(StaffRequest.date <= end)
    stmt = stmt.order_by(StaffRequest.date.asc(), StaffRequest.id.asc())
    return list(db.scalars(stmt).unique())


def get_requests_in_range(db: Session, start: date, end: date) -> List[StaffRequest]:
    """Requests with start <= date <= end in insertion order, which is the order they are applied."""
    stmt = (
        select(StaffRequest)
        .where(StaffRequest.date >= start, StaffRequest.date <= end)
        .order_by(StaffRequest.id.asc())
    )
    return list(db.scalars(stmt))


# -------- mutations --------

def create_request(db: Session, dto: StaffRequestCreate) -> StaffRequest:
    _ensure_employee_exists(db, dto.employee_id)
    row = StaffRequest(employee_id=dto.employee_id, date=dto.date, type=dto.type)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def delete_request(db: Session, request_id: int) -> bool:
    row = db.get(StaffRequest, request_id)
    if not row:
        return False
    db.delete(row)
    db.commit()
    return True
