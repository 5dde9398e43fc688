from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

import crud
from dependencies import get_db
from errors import NotFoundError
from models import (
    Laptop,
    LaptopIn,
    LaptopStatusIn,
    LaptopUpdate,
    MaintenanceIn,
    MaintenanceRecord,
)
from normalizers import STATUS_AVAILABLE, status_filter

router = APIRouter(prefix="/laptops", tags=["laptops"])


def _laptop_or_404(db: Session, laptop_id: str) -> Laptop:
    laptop = crud.get_laptop(db, laptop_id)
    if not laptop:
        raise NotFoundError("Laptop not found")
    return laptop


@router.post("", response_model=Laptop, status_code=201)
def create_laptop_api(
    body: LaptopIn,
    db: Session = Depends(get_db),
):
    return crud.create_laptop(db, body)


@router.get("", response_model=list[Laptop])
def list_laptops_api(
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return crud.list_laptops(db, status=status_filter(status))


@router.get("/available", response_model=list[Laptop])
def list_available_laptops_api(db: Session = Depends(get_db)):
    return crud.list_laptops(db, status=STATUS_AVAILABLE)


@router.post("/maintenance", response_model=MaintenanceRecord, status_code=201)
def log_maintenance_api(
    body: MaintenanceIn,
    db: Session = Depends(get_db),
):
    record = crud.log_maintenance(db, body)
    if not record:
        raise NotFoundError("Laptop not found")
    return record


@router.get("/{laptop_id}", response_model=Laptop)
def get_laptop_api(
    laptop_id: str,
    db: Session = Depends(get_db),
):
    return _laptop_or_404(db, laptop_id)


@router.get("/{laptop_id}/maintenance", response_model=list[MaintenanceRecord])
def list_maintenance_api(
    laptop_id: str,
    db: Session = Depends(get_db),
):
    _laptop_or_404(db, laptop_id)
    return crud.list_maintenance(db, laptop_id)


@router.patch("/{laptop_id}/status", response_model=Laptop)
def update_laptop_status_api(
    laptop_id: str,
    body: LaptopStatusIn,
    db: Session = Depends(get_db),
):
    updated = crud.set_laptop_status(db, laptop_id, body.status)
    if not updated:
        raise NotFoundError("Laptop not found")
    return updated


@router.put("/{laptop_id}", response_model=Laptop)
def update_laptop_api(
    laptop_id: str,
    body: LaptopUpdate,
    db: Session = Depends(get_db),
):
    updated = crud.update_laptop(db, laptop_id, body)
    if not updated:
        raise NotFoundError("Laptop not found")
    return updated


@router.delete("/{laptop_id}", status_code=204)
def delete_laptop_api(
    laptop_id: str,
    db: Session = Depends(get_db),
):
    ok = crud.delete_laptop(db, laptop_id)
    if not ok:
        raise NotFoundError("Laptop not found")
    return Response(status_code=204)
