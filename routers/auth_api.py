import logging
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import crud
from config import AppConfig
from dependencies import get_config, get_current_claims, get_db
from errors import AuthenticationError, NotFoundError
from models import LoginIn, LoginOut, RegisterIn, RegisterOut, TokenUser
from security import create_access_token, hash_password, verify_password

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("app.auth")


@router.post("/register", response_model=RegisterOut, status_code=201)
def register_api(
    body: RegisterIn,
    db: Session = Depends(get_db),
):
    employee = crud.create_employee(db, body, password_hash=hash_password(body.password))
    return RegisterOut(message="Registration successful", employee=employee)


@router.post("/login", response_model=LoginOut)
def login_api(
    body: LoginIn,
    db: Session = Depends(get_db),
    config: AppConfig = Depends(get_config),
):
    row = crud.find_employee_for_login(db, body.email)
    if not row:
        raise NotFoundError("Employee not found")
    if not verify_password(body.password, row.password_hash):
        logger.info("login rejected email=%s", body.email)
        raise AuthenticationError("Password is not valid")

    user = TokenUser(
        id=row.id,
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        role=row.role,
        department=row.department,
    )
    token = create_access_token(
        user.model_dump(by_alias=True),
        secret=config.jwt_secret,
        expires_hours=config.jwt_expires_hours,
    )
    return LoginOut(message="Login Successful", token=token, user=user)


@router.get("/me", response_model=TokenUser)
def me_api(claims: dict[str, Any] = Depends(get_current_claims)):
    return TokenUser.model_validate(claims)
