from collections.abc import Generator
from typing import Any, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from config import AppConfig
from errors import AuthenticationError
from security import decode_access_token

bearer = HTTPBearer(auto_error=False)


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_current_claims(
    authorization: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    config: AppConfig = Depends(get_config),
) -> dict[str, Any]:
    if not authorization or not authorization.credentials:
        raise AuthenticationError("Authorization token is missing")
    return decode_access_token(authorization.credentials, secret=config.jwt_secret)
