from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from .schema import EmployeeSchema, EmployeeCreatePayload, EmployeeCreate, EmployeeUpdate
from . import service

employee_router = APIRouter(prefix="/employees", tags=["Employees"])

# List all employees
@employee_router.get("", response_model=list[EmployeeSchema])
def list_employees(active_only: bool = Query(False), db: Session = Depends(get_db)):
    return service.get_employees(db, active_only=active_only)

# Get employee by id
@employee_router.get("/{employee_id}", response_model=EmployeeSchema)
def employee_detail(employee_id: int, db: Session = Depends(get_db)):
    obj = service.get_employee(db, employee_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    return obj

# Create employee
@employee_router.post("", response_model=EmployeeSchema, status_code=status.HTTP_201_CREATED)
def employee_post(payload: EmployeeCreatePayload, db: Session = Depends(get_db)):
    internal = EmployeeCreate(**payload.model_dump())
    try:
        return service.create_employee(db, internal)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="employee could not be created")

# Update employee
@employee_router.patch("/{employee_id}", response_model=EmployeeSchema)
def employee_patch(employee_id: int, payload: EmployeeUpdate, db: Session = Depends(get_db)):
    obj = service.get_employee(db, employee_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    return service.update_employee(db, employee_id, payload)

# Delete employee
@employee_router.delete("/{employee_id}")
def employee_delete(employee_id: int, db: Session = Depends(get_db)):
    obj = service.get_employee(db, employee_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    service.delete_employee(db, employee_id)
    return {"message": "employee deleted"}
