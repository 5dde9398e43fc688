from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, Literal
from datetime import date, datetime

from normalizers import (
    STATUS_AVAILABLE,
    blank_to_none,
    normalize_email,
    normalize_serial_number,
    normalize_status,
    require_text,
)

Status = Literal["available", "assigned", "under maintenance"]


class CamelModel(BaseModel):
    """JSON keys are camelCase (serialNumber, purchaseDate, ...); attributes stay snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Laptop ----------
class LaptopIn(CamelModel):
    brand: str
    model: str
    serial_number: str
    status: Status = STATUS_AVAILABLE
    purchase_date: date

    @field_validator("brand", "model", mode="before")
    @classmethod
    def _strip_text(cls, v, info: ValidationInfo):
        return require_text(v, to_camel(info.field_name))

    @field_validator("serial_number", mode="before")
    @classmethod
    def _normalize_serial(cls, v):
        return normalize_serial_number(v)

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, v):
        return normalize_status(v, default=STATUS_AVAILABLE)


class LaptopUpdate(CamelModel):
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    status: Optional[Status] = None
    purchase_date: Optional[date] = None

    @field_validator("brand", "model", mode="before")
    @classmethod
    def _strip_text(cls, v, info: ValidationInfo):
        if v is None:
            return None
        return require_text(v, to_camel(info.field_name))

    @field_validator("serial_number", mode="before")
    @classmethod
    def _normalize_serial(cls, v):
        if v is None:
            return None
        return normalize_serial_number(v)

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, v):
        if v is None:
            return None
        return normalize_status(v)


class LaptopStatusIn(CamelModel):
    status: Status

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, v):
        return normalize_status(v)


class Laptop(CamelModel):
    id: str
    brand: str
    model: str
    serial_number: str
    status: Status = STATUS_AVAILABLE
    purchase_date: date
    created_at: datetime
    updated_at: datetime


# ---------- Maintenance ----------
class MaintenanceIn(CamelModel):
    laptop_id: str
    maintenance_type: str
    description: Optional[str] = None

    @field_validator("laptop_id", "maintenance_type", mode="before")
    @classmethod
    def _required(cls, v, info: ValidationInfo):
        return require_text(v, to_camel(info.field_name))


class MaintenanceRecord(CamelModel):
    id: str
    laptop_id: str
    maintenance_type: str
    description: Optional[str] = None
    created_at: datetime


# ---------- Employee ----------
class EmployeeIn(CamelModel):
    first_name: str
    last_name: str
    email: str
    password: Optional[str] = None
    department: Optional[str] = None
    role: Optional[str] = None
    phone_number: Optional[str] = None
    laptop_assigned: Optional[str] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def _required(cls, v, info: ValidationInfo):
        return require_text(v, to_camel(info.field_name))

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, v):
        return normalize_email(v)

    @field_validator("department", "role", "phone_number", "laptop_assigned", mode="before")
    @classmethod
    def _blank(cls, v, info: ValidationInfo):
        return blank_to_none(v, to_camel(info.field_name))


class EmployeeUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    role: Optional[str] = None
    phone_number: Optional[str] = None
    # explicit null or "" clears the assignment
    laptop_assigned: Optional[str] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def _required(cls, v, info: ValidationInfo):
        if v is None:
            return None
        return require_text(v, to_camel(info.field_name))

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, v):
        if v is None:
            return None
        return normalize_email(v)

    @field_validator("department", "role", "phone_number", "laptop_assigned", mode="before")
    @classmethod
    def _blank(cls, v, info: ValidationInfo):
        return blank_to_none(v, to_camel(info.field_name))


class Employee(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    department: Optional[str] = None
    role: Optional[str] = None
    phone_number: Optional[str] = None
    laptop_assigned: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ---------- Auth ----------
class RegisterIn(EmployeeIn):
    password: str

    @field_validator("password", mode="before")
    @classmethod
    def _password(cls, v):
        return require_text(v, "password")


class LoginIn(CamelModel):
    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, v):
        return normalize_email(v)


class TokenUser(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: Optional[str] = None
    department: Optional[str] = None


class RegisterOut(CamelModel):
    message: str
    employee: Employee


class LoginOut(CamelModel):
    message: str
    token: str
    user: TokenUser
