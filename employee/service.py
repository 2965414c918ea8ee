from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import select
from .models import Employee, EmployeeStatus
from .schema import EmployeeCreate, EmployeeUpdate

def get_employees(db: Session, *, active_only: bool = False) -> List[Employee]:
    statement = select(Employee)
    if active_only:
        statement = statement.where(Employee.status == EmployeeStatus.active)
    statement = statement.order_by(Employee.role.asc(), Employee.name.asc(), Employee.id.asc())
    return list(db.scalars(statement))

def get_active_employees(db: Session) -> List[Employee]:
    statement = select(Employee).where(Employee.status == EmployeeStatus.active).order_by(Employee.id.asc())
    return list(db.scalars(statement))

def get_employee(db: Session, employee_id: int) -> Optional[Employee]:
    return db.get(Employee, employee_id)

def create_employee(db: Session, employee: EmployeeCreate) -> Employee:
    db_employee = Employee(
        name=employee.name,
        role=employee.role,
        preferred_start=employee.preferred_start,
        status=employee.status,
    )
    db.add(db_employee)
    db.commit()
    db.refresh(db_employee)
    return db_employee

def update_employee(db: Session, employee_id: int, patch: EmployeeUpdate) -> Optional[Employee]:
    db_employee = db.get(Employee, employee_id)
    if not db_employee:
        return None
    data = patch.model_dump(exclude_unset=True)
    for k,v in data.items():
        setattr(db_employee, k, v)
    db.commit()
    db.refresh(db_employee)
    return db_employee

def delete_employee(db: Session, employee_id: int) -> bool:
    db_employee = db.get(Employee, employee_id)
    if not db_employee:
        return False
    db.delete(db_employee)
    db.commit()
    return True
