from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

import crud
from dependencies import get_db
from errors import NotFoundError
from models import Employee, EmployeeIn, EmployeeUpdate
from security import hash_password

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[Employee])
def list_employees_api(db: Session = Depends(get_db)):
    return crud.list_employees(db)


@router.post("", response_model=Employee, status_code=201)
def create_employee_api(
    body: EmployeeIn,
    db: Session = Depends(get_db),
):
    password_hash = hash_password(body.password) if body.password else None
    return crud.create_employee(db, body, password_hash=password_hash)


@router.get("/{employee_id}", response_model=Employee)
def get_employee_api(
    employee_id: str,
    db: Session = Depends(get_db),
):
    employee = crud.get_employee(db, employee_id)
    if not employee:
        raise NotFoundError("Employee not found")
    return employee


@router.put("/{employee_id}", response_model=Employee)
def update_employee_api(
    employee_id: str,
    body: EmployeeUpdate,
    db: Session = Depends(get_db),
):
    updated = crud.update_employee(db, employee_id, body)
    if not updated:
        raise NotFoundError("Employee not found")
    return updated


@router.delete("/{employee_id}", status_code=204)
def delete_employee_api(
    employee_id: str,
    db: Session = Depends(get_db),
):
    ok = crud.delete_employee(db, employee_id)
    if not ok:
        raise NotFoundError("Employee not found")
    return Response(status_code=204)
