from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

import crud
from dependencies import get_db
from errors import InventoryError
from models import EmployeeIn, LaptopIn, MaintenanceIn
from normalizers import STATUS_AVAILABLE, VALID_STATUSES, normalize_status, status_filter

router = APIRouter(prefix="/ui", include_in_schema=False)


def _error_message(e: Exception) -> str:
    if isinstance(e, InventoryError):
        return e.message
    if isinstance(e, PydanticValidationError):
        first = e.errors()[0]
        return str(first.get("msg", "invalid input")).removeprefix("Value error, ")
    return "invalid input"


def _redirect(url: str, error: Optional[str] = None) -> RedirectResponse:
    if error:
        url = f"{url}?error={quote(error)}"
    return RedirectResponse(url=url, status_code=303)


@router.get("/laptops", response_class=HTMLResponse)
def laptops_ui(
    request: Request,
    status: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
):
    status = status_filter(status)
    laptops = crud.list_laptops(db, status=status)

    holders = {e.laptop_assigned: e for e in crud.list_employees(db) if e.laptop_assigned}

    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "laptops.html",
        {
            "laptops": laptops,
            "holders": holders,
            "status": status or "",
            "statuses": VALID_STATUSES,
            "error": error,
        },
    )


@router.post("/laptops")
def create_laptop_ui(
    brand: str = Form(...),
    model: str = Form(...),
    serial_number: str = Form(...),
    purchase_date: str = Form(...),
    status: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    try:
        body = LaptopIn(
            brand=brand,
            model=model,
            serial_number=serial_number,
            status=status or STATUS_AVAILABLE,
            purchase_date=purchase_date,
        )
        crud.create_laptop(db, body)
    except (PydanticValidationError, InventoryError) as e:
        return _redirect("/ui/laptops", _error_message(e))
    return _redirect("/ui/laptops")


@router.post("/laptops/{laptop_id}/status")
def update_laptop_status_ui(
    laptop_id: str,
    status: str = Form(...),
    db: Session = Depends(get_db),
):
    try:
        normalized = normalize_status(status)
    except ValueError as e:
        return _redirect("/ui/laptops", str(e))
    if not crud.set_laptop_status(db, laptop_id, normalized):
        return _redirect("/ui/laptops", "Laptop not found")
    return _redirect("/ui/laptops")


@router.post("/laptops/{laptop_id}/maintenance")
def log_maintenance_ui(
    laptop_id: str,
    maintenance_type: str = Form(...),
    description: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    try:
        body = MaintenanceIn(
            laptop_id=laptop_id,
            maintenance_type=maintenance_type,
            description=description,
        )
    except PydanticValidationError as e:
        return _redirect("/ui/laptops", _error_message(e))
    if not crud.log_maintenance(db, body):
        return _redirect("/ui/laptops", "Laptop not found")
    return _redirect("/ui/laptops")


@router.post("/laptops/{laptop_id}/delete")
def delete_laptop_ui(
    laptop_id: str,
    db: Session = Depends(get_db),
):
    if not crud.delete_laptop(db, laptop_id):
        return _redirect("/ui/laptops", "Laptop not found")
    return _redirect("/ui/laptops")


@router.get("/employees", response_class=HTMLResponse)
def employees_ui(
    request: Request,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
):
    employees = crud.list_employees(db)
    available = crud.list_laptops(db, status=STATUS_AVAILABLE)
    laptop_map = {a.id: a for a in crud.list_laptops(db)}

    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "employees.html",
        {
            "employees": employees,
            "available_laptops": available,
            "laptop_map": laptop_map,
            "error": error,
        },
    )


@router.post("/employees")
def create_employee_ui(
    first_name: str = Form(...),
    last_name: str = Form(...),
    email: str = Form(...),
    department: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    phone_number: Optional[str] = Form(None),
    laptop_assigned: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    try:
        body = EmployeeIn(
            first_name=first_name,
            last_name=last_name,
            email=email,
            department=department,
            role=role,
            phone_number=phone_number,
            laptop_assigned=laptop_assigned,
        )
        crud.create_employee(db, body)
    except (PydanticValidationError, InventoryError) as e:
        return _redirect("/ui/employees", _error_message(e))
    return _redirect("/ui/employees")


@router.post("/employees/{employee_id}/delete")
def delete_employee_ui(
    employee_id: str,
    db: Session = Depends(get_db),
):
    if not crud.delete_employee(db, employee_id):
        return _redirect("/ui/employees", "Employee not found")
    return _redirect("/ui/employees")
