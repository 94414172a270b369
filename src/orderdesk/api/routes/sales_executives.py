"""Sales executive directory and vehicle endpoints."""

from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter, Depends, status

from ...config import settings
from ...models.domain import Identity
from ...schemas.routes import SalesExecutiveModel
from ...services.registry import list_sales_executives
from ..deps import get_identity, get_store

router = APIRouter(tags=["reference"])


@router.get("/sales-executives", response_model=List[SalesExecutiveModel], status_code=status.HTTP_200_OK)
def get_sales_executives(
    client: Any = Depends(get_store),
    identity: Identity = Depends(get_identity),
) -> List[SalesExecutiveModel]:
    return [SalesExecutiveModel.from_executive(executive) for executive in list_sales_executives(client)]


@router.get("/vehicles", response_model=List[str], status_code=status.HTTP_200_OK)
def get_vehicles(identity: Identity = Depends(get_identity)) -> List[str]:
    return list(settings.vehicles)
