from __future__ import annotations

from typing import Literal, get_args

from fastapi import Depends, Header
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import ForbiddenError, UnauthenticatedError
from app.persistence.pg import get_session
from app.persistence.repositories import UserRepository


Role = Literal["admin", "user"]
ADMIN_ROLE: Role = "admin"


class Principal(BaseModel):
    id: str
    role: Role
    email: str | None = None


def _extract_api_key(authorization: str | None, x_api_key: str | None) -> str | None:
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise UnauthenticatedError("invalid authorization header")
        return token.strip()
    if x_api_key and x_api_key.strip():
        return x_api_key.strip()
    return None


def _user_id_from_api_key(api_key: str) -> str | None:
    settings = get_settings()
    key_map = {
        settings.admin_api_key: settings.admin_user_id,
        settings.user_api_key: settings.user_user_id,
    }
    return key_map.get(api_key)


def load_principal(session: Session, user_id: str) -> Principal:
    user = UserRepository(session).find_by_id(user_id)
    if user is None:
        raise UnauthenticatedError(f"user not found: {user_id}")
    if user.role not in get_args(Role):
        raise ForbiddenError(f"unsupported role: {user.role}")
    return Principal(id=user.user_id, role=user.role, email=user.email)


def get_principal(
    authorization: str | None = Header(default=None),
    x_api_key: str | None = Header(default=None),
    session: Session = Depends(get_session),
) -> Principal:
    settings = get_settings()
    if not settings.auth_enabled:
        return Principal(id=settings.admin_user_id, role=ADMIN_ROLE)

    api_key = _extract_api_key(authorization, x_api_key)
    if not api_key:
        raise UnauthenticatedError("missing api key")

    user_id = _user_id_from_api_key(api_key)
    if user_id is None:
        raise UnauthenticatedError("invalid api key")
    return load_principal(session, user_id)


def require_role(principal: Principal | None, role: Role) -> None:
    if principal is None:
        raise UnauthenticatedError("no authenticated principal")
    if principal.role != role:
        raise ForbiddenError("access denied")


def get_admin(principal: Principal = Depends(get_principal)) -> Principal:
    require_role(principal, ADMIN_ROLE)
    return principal
