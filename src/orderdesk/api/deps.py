"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from typing import Any, NoReturn

from fastapi import Depends, Header, HTTPException, status

from ..db.supabase import get_supabase_client
from ..models.domain import ROLES, Identity
from ..services.errors import AdminRequired, OrderDeskError, StoreUnavailableError
from ..services.propagation import PropagationDispatcher, get_dispatcher


def get_store() -> Any:
    client = get_supabase_client()
    if client is None:
        raise_http(StoreUnavailableError("Database not configured. Set ORDERDESK_SUPABASE_URL and ORDERDESK_SUPABASE_KEY."))
    return client


def get_propagation_dispatcher() -> PropagationDispatcher:
    return get_dispatcher()


def get_identity(
    x_user_id: str | None = Header(default=None),
    x_username: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Identity:
    """Identity forwarded by the upstream authentication layer."""
    if not x_user_id or not x_username or not x_user_role:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    role = x_user_role.strip().lower()
    if role not in ROLES:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown role")
    return Identity(id=x_user_id, username=x_username, role=role)


def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_admin:
        raise_http(AdminRequired())
    return identity


def raise_http(exc: OrderDeskError) -> NoReturn:
    raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
