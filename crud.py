from __future__ import annotations

import logging
from datetime import datetime, timezone

from typing import Optional
from uuid import uuid4

from sqlalchemy import select, delete, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from errors import DuplicateError, NotFoundError
from models import (
    Employee,
    EmployeeIn,
    EmployeeUpdate,
    Laptop,
    LaptopIn,
    LaptopUpdate,
    MaintenanceIn,
    MaintenanceRecord,
)
from orm import EmployeeORM, LaptopORM, MaintenanceORM
from normalizers import STATUS_ASSIGNED, STATUS_AVAILABLE, STATUS_UNDER_MAINTENANCE

logger = logging.getLogger("app.crud")

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back naive; they are always stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

def persist(db: Session, *, commit: bool) -> None:
    if commit:
        db.commit()
    else:
        db.flush()

def _laptop_to_schema(a: LaptopORM) -> Laptop:
    return Laptop(
        id=a.id,
        brand=a.brand,
        model=a.model,
        serial_number=a.serial_number,
        status=a.status,  # type: ignore
        purchase_date=a.purchase_date,
        created_at=as_utc(a.created_at),
        updated_at=as_utc(a.updated_at),
    )

def _maintenance_to_schema(m: MaintenanceORM) -> MaintenanceRecord:
    return MaintenanceRecord(
        id=m.id,
        laptop_id=m.laptop_id,
        maintenance_type=m.maintenance_type,
        description=m.description,
        created_at=as_utc(m.created_at),
    )

def _employee_to_schema(e: EmployeeORM) -> Employee:
    return Employee(
        id=e.id,
        first_name=e.first_name,
        last_name=e.last_name,
        email=e.email,
        department=e.department,
        role=e.role,
        phone_number=e.phone_number,
        laptop_assigned=e.laptop_assigned,
        created_at=as_utc(e.created_at),
        updated_at=as_utc(e.updated_at),
    )


# ---------- Laptop ----------
def find_laptop_by_serial(
    db: Session, serial_number: str, exclude_laptop_id: Optional[str] = None
) -> Optional[Laptop]:
    """Case-insensitive lookup of an already normalized serial number.

    Advisory only: nothing stops a concurrent writer between this check and
    the insert. The unique index on serial_number is what actually holds.
    """
    stmt = select(LaptopORM).where(func.lower(LaptopORM.serial_number) == serial_number.lower())
    if exclude_laptop_id:
        stmt = stmt.where(LaptopORM.id != exclude_laptop_id)
    row = db.execute(stmt).scalars().first()
    return _laptop_to_schema(row) if row else None


def _duplicate_serial(existing: Laptop) -> DuplicateError:
    return DuplicateError(
        f"Serial number {existing.serial_number} is already in use by {existing.brand} {existing.model}"
    )


def get_laptop(db: Session, laptop_id: str) -> Optional[Laptop]:
    row = db.get(LaptopORM, laptop_id)
    return _laptop_to_schema(row) if row else None


def list_laptops(db: Session, *, status: Optional[str] = None) -> list[Laptop]:
    stmt = select(LaptopORM)
    if status:
        stmt = stmt.where(LaptopORM.status == status)
    stmt = stmt.order_by(LaptopORM.created_at.asc())
    rows = db.execute(stmt).scalars().all()
    return [_laptop_to_schema(a) for a in rows]


def create_laptop(db: Session, body: LaptopIn, *, commit: bool = True) -> Laptop:
    existing = find_laptop_by_serial(db, body.serial_number)
    if existing:
        logger.info("duplicate serial rejected serial=%s laptop_id=%s", body.serial_number, existing.id)
        raise _duplicate_serial(existing)

    now = utcnow()
    a = LaptopORM(
        id=str(uuid4()),
        brand=body.brand,
        model=body.model,
        serial_number=body.serial_number,
        status=body.status,
        purchase_date=body.purchase_date,
        created_at=now,
        updated_at=now,
    )
    db.add(a)
    try:
        persist(db, commit=commit)
    except IntegrityError as e:
        db.rollback()
        logger.warning("serial unique index hit serial=%s", body.serial_number)
        raise DuplicateError("Duplicate serial number found") from e
    if commit:
        db.refresh(a)
    logger.info("laptop created laptop_id=%s serial=%s status=%s", a.id, a.serial_number, a.status)
    return _laptop_to_schema(a)


def update_laptop(db: Session, laptop_id: str, body: LaptopUpdate, *, commit: bool = True) -> Optional[Laptop]:
    a = db.get(LaptopORM, laptop_id)
    if not a:
        return None

    # explicit nulls mean "leave as is"; every laptop column is required
    data = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}

    serial = data.get("serial_number")
    if serial and serial != a.serial_number:
        existing = find_laptop_by_serial(db, serial, exclude_laptop_id=laptop_id)
        if existing:
            raise _duplicate_serial(existing)

    for k, v in data.items():
        setattr(a, k, v)
    a.updated_at = utcnow()

    try:
        persist(db, commit=commit)
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError("Duplicate serial number found") from e
    if commit:
        db.refresh(a)
    return _laptop_to_schema(a)


def _apply_status(a: LaptopORM, status: str, now: datetime) -> None:
    if a.status != status:
        logger.info("laptop status laptop_id=%s from=%s to=%s", a.id, a.status, status)
    a.status = status
    a.updated_at = now


def set_laptop_status(db: Session, laptop_id: str, status: str, *, commit: bool = True) -> Optional[Laptop]:
    """Unguarded: any status may follow any other."""
    a = db.get(LaptopORM, laptop_id)
    if not a:
        return None

    _apply_status(a, status, utcnow())

    persist(db, commit=commit)
    if commit:
        db.refresh(a)
    return _laptop_to_schema(a)


def delete_laptop(db: Session, laptop_id: str, *, commit: bool = True) -> bool:
    """Hard delete. Maintenance history is kept; employee references are cleared."""
    result = db.execute(delete(LaptopORM).where(LaptopORM.id == laptop_id))
    if result.rowcount == 0:
        return False

    db.execute(
        update(EmployeeORM)
        .where(EmployeeORM.laptop_assigned == laptop_id)
        .values(laptop_assigned=None, updated_at=utcnow())
    )
    persist(db, commit=commit)
    logger.info("laptop deleted laptop_id=%s", laptop_id)
    return True


# ---------- Maintenance ----------
def log_maintenance(db: Session, body: MaintenanceIn, *, commit: bool = True) -> Optional[MaintenanceRecord]:
    """Record a maintenance event and force the laptop into maintenance.

    Both writes land in one transaction. Returns None (and writes nothing)
    when the laptop does not exist.
    """
    a = db.get(LaptopORM, body.laptop_id)
    if not a:
        return None

    now = utcnow()
    m = MaintenanceORM(
        id=str(uuid4()),
        laptop_id=a.id,
        maintenance_type=body.maintenance_type,
        description=body.description,
        created_at=now,
    )
    db.add(m)
    _apply_status(a, STATUS_UNDER_MAINTENANCE, now)

    persist(db, commit=commit)
    if commit:
        db.refresh(m)
    logger.info("maintenance logged laptop_id=%s type=%s", a.id, m.maintenance_type)
    return _maintenance_to_schema(m)


def list_maintenance(db: Session, laptop_id: str) -> list[MaintenanceRecord]:
    stmt = (
        select(MaintenanceORM)
        .where(MaintenanceORM.laptop_id == laptop_id)
        .order_by(MaintenanceORM.created_at.asc())
    )
    rows = db.execute(stmt).scalars().all()
    return [_maintenance_to_schema(m) for m in rows]


# ---------- Employee ----------
def email_exists(db: Session, email: str, exclude_employee_id: Optional[str] = None) -> bool:
    stmt = select(EmployeeORM).where(EmployeeORM.email == email)
    if exclude_employee_id:
        stmt = stmt.where(EmployeeORM.id != exclude_employee_id)
    return db.execute(stmt).first() is not None


def get_employee(db: Session, employee_id: str) -> Optional[Employee]:
    row = db.get(EmployeeORM, employee_id)
    return _employee_to_schema(row) if row else None


def find_employee_for_login(db: Session, email: str) -> Optional[EmployeeORM]:
    return db.execute(select(EmployeeORM).where(EmployeeORM.email == email)).scalars().first()


def list_employees(db: Session) -> list[Employee]:
    rows = db.execute(select(EmployeeORM).order_by(EmployeeORM.created_at.asc())).scalars().all()
    return [_employee_to_schema(e) for e in rows]


def _assign_laptop(db: Session, laptop_id: str, now: datetime) -> None:
    a = db.get(LaptopORM, laptop_id)
    if not a:
        raise NotFoundError("Laptop not found")
    _apply_status(a, STATUS_ASSIGNED, now)


def laptop_holder_count(db: Session, laptop_id: str, exclude_employee_id: Optional[str] = None) -> int:
    stmt = select(func.count()).select_from(EmployeeORM).where(EmployeeORM.laptop_assigned == laptop_id)
    if exclude_employee_id:
        stmt = stmt.where(EmployeeORM.id != exclude_employee_id)
    return int(db.execute(stmt).scalar_one())


def _release_laptop(db: Session, laptop_id: str, releasing_employee_id: str, now: datetime) -> None:
    """Back to available once nobody else holds it.

    A laptop sent to maintenance meanwhile keeps that status.
    """
    a = db.get(LaptopORM, laptop_id)
    if not a or a.status != STATUS_ASSIGNED:
        return
    if laptop_holder_count(db, laptop_id, exclude_employee_id=releasing_employee_id) > 0:
        return
    _apply_status(a, STATUS_AVAILABLE, now)


def create_employee(
    db: Session,
    body: EmployeeIn,
    *,
    password_hash: Optional[str] = None,
    commit: bool = True,
) -> Employee:
    """Create the employee and mark the assigned laptop in the same transaction.

    Raises DuplicateError for a taken email and NotFoundError for an
    unknown laptop id; nothing is written in either case.
    """
    if email_exists(db, body.email):
        raise DuplicateError("An employee with this email already exists")

    now = utcnow()
    if body.laptop_assigned:
        _assign_laptop(db, body.laptop_assigned, now)

    e = EmployeeORM(
        id=str(uuid4()),
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        password_hash=password_hash,
        department=body.department,
        role=body.role,
        phone_number=body.phone_number,
        laptop_assigned=body.laptop_assigned,
        created_at=now,
        updated_at=now,
    )
    db.add(e)
    try:
        persist(db, commit=commit)
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateError("An employee with this email already exists") from exc
    if commit:
        db.refresh(e)
    return _employee_to_schema(e)


def update_employee(
    db: Session, employee_id: str, body: EmployeeUpdate, *, commit: bool = True
) -> Optional[Employee]:
    e = db.get(EmployeeORM, employee_id)
    if not e:
        return None

    data = body.model_dump(exclude_unset=True)
    if data.get("email") and email_exists(db, data["email"], exclude_employee_id=employee_id):
        raise DuplicateError("An employee with this email already exists")

    now = utcnow()
    if "laptop_assigned" in data:
        new_laptop = data.pop("laptop_assigned")
        old_laptop = e.laptop_assigned
        # re-submitting the held laptop marks it assigned again
        if new_laptop:
            _assign_laptop(db, new_laptop, now)
        if old_laptop and old_laptop != new_laptop:
            _release_laptop(db, old_laptop, e.id, now)
        e.laptop_assigned = new_laptop

    for k, v in data.items():
        if v is None and k in ("first_name", "last_name", "email"):
            continue
        setattr(e, k, v)
    e.updated_at = now

    persist(db, commit=commit)
    if commit:
        db.refresh(e)
    return _employee_to_schema(e)


def delete_employee(db: Session, employee_id: str, *, commit: bool = True) -> bool:
    e = db.get(EmployeeORM, employee_id)
    if not e:
        return False

    if e.laptop_assigned:
        _release_laptop(db, e.laptop_assigned, e.id, utcnow())

    db.execute(delete(EmployeeORM).where(EmployeeORM.id == employee_id))
    persist(db, commit=commit)
    return True
