from __future__ import annotations
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db

from .schema import StaffRequestSchema, StaffRequestCreatePayload, StaffRequestCreate
from . import service

request_router = APIRouter(prefix="/requests", tags=["Requests"])

# List requests, optional filters by employee and date window
@request_router.get("", response_model=list[StaffRequestSchema])
def list_requests(
    employee_id: Optional[int] = Query(None),
    start: Optional[date] = Query(None, description="date >= start"),
    end: Optional[date] = Query(None, description="date <= end"),
    db: Session = Depends(get_db),
):
    return service.get_requests(db, employee_id=employee_id, start=start, end=end)

# Create
@request_router.post("", response_model=StaffRequestSchema, status_code=status.HTTP_201_CREATED)
def create_request(payload: StaffRequestCreatePayload, db: Session = Depends(get_db)):
    dto = StaffRequestCreate(**payload.model_dump())
    try:
        return service.create_request(db, dto)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="request could not be saved")

# Delete
@request_router.delete("/{request_id}")
def delete_request(request_id: int, db: Session = Depends(get_db)):
    if not service.delete_request(db, request_id):
        raise HTTPException(status_code=404, detail="request not found")
    return {"message": "request deleted"}
