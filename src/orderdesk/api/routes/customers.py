"""Customer ledger, import and export endpoints."""

from __future__ import annotations

import logging
import math
from datetime import date
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status

from ...config import settings
from ...models.domain import Identity
from ...schemas.customers import (
    CustomerCreateRequest,
    CustomerImportRequest,
    CustomerImportResponse,
    CustomerListResponse,
    CustomerModel,
    CustomerUpdateRequest,
    MessageResponse,
)
from ...schemas.orders import PaginationModel
from ...services import customers as customer_service
from ...services.csv_codec import decode_csv
from ...services.errors import OrderDeskError
from ...services.propagation import PropagationDispatcher
from ..deps import get_identity, get_propagation_dispatcher, get_store, raise_http, require_admin

router = APIRouter(prefix="/customers", tags=["customers"])

ALLOWED_IMPORT_SUFFIXES = {".csv", ".xlsx"}


def _import_response(result: customer_service.ImportResult) -> CustomerImportResponse:
    return CustomerImportResponse(
        message=result.message,
        imported=result.imported,
        updated=result.updated,
        failed=result.failed,
        errors=result.errors or None,
    )


@router.get("", response_model=CustomerListResponse, status_code=status.HTTP_200_OK)
def list_customers(
    route: str | None = Query(default=None, description="Route name, or 'all'"),
    search: str | None = Query(default=None, description="Customer name or phone"),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    client: Any = Depends(get_store),
    identity: Identity = Depends(get_identity),
) -> CustomerListResponse:
    page_size = min(limit or settings.default_page_size, settings.max_page_size)
    try:
        customers, total = customer_service.list_customers(
            client,
            route_name=route,
            search=search,
            page=page,
            page_size=page_size,
        )
        route_names = customer_service.route_names_for(client, customers)
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error listing customers: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to list customers: {str(exc)}",
        ) from exc
    return CustomerListResponse(
        customers=[CustomerModel.from_customer(customer, route_names.get(customer.route_id)) for customer in customers],
        pagination=PaginationModel(
            total=total,
            page=page,
            limit=page_size,
            totalPages=math.ceil(total / page_size),
        ),
    )


@router.get("/export/csv", status_code=status.HTTP_200_OK)
def export_customers(
    route: str | None = Query(default=None),
    search: str | None = Query(default=None),
    client: Any = Depends(get_store),
    admin: Identity = Depends(require_admin),
) -> Response:
    try:
        content = customer_service.export_customers_csv(client, route_name=route, search=search)
    except Exception as exc:
        logging.exception(f"Error exporting customers: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to export customers: {str(exc)}",
        ) from exc

    filename = f"customers-{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=CustomerImportResponse, status_code=status.HTTP_200_OK)
def import_customers(
    payload: CustomerImportRequest,
    client: Any = Depends(get_store),
    dispatcher: PropagationDispatcher = Depends(get_propagation_dispatcher),
    admin: Identity = Depends(require_admin),
) -> CustomerImportResponse:
    try:
        result = customer_service.import_customers_csv(client, payload.csvData, dispatcher=dispatcher)
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error importing customers: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to import customers: {str(exc)}",
        ) from exc
    return _import_response(result)


@router.post("/import/upload", response_model=CustomerImportResponse, status_code=status.HTTP_200_OK)
async def upload_customers(
    file: UploadFile = File(..., description="CSV or Excel file with customer data"),
    client: Any = Depends(get_store),
    dispatcher: PropagationDispatcher = Depends(get_propagation_dispatcher),
    admin: Identity = Depends(require_admin),
) -> CustomerImportResponse:
    suffix = Path(file.filename or "").suffix.lower()
    if suffix not in ALLOWED_IMPORT_SUFFIXES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type. Allowed: {', '.join(sorted(ALLOWED_IMPORT_SUFFIXES))}",
        )

    content = await file.read()
    try:
        if suffix == ".xlsx":
            fieldnames, rows = customer_service.rows_from_workbook(content)
        else:
            fieldnames, rows = decode_csv(content.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSV file must be UTF-8 encoded",
        ) from exc
    except Exception as exc:
        logging.exception(f"Error reading upload {file.filename}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to read file: {str(exc)}",
        ) from exc

    try:
        result = customer_service.import_customers(client, fieldnames, rows, dispatcher=dispatcher)
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error importing customers from {file.filename}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to import customers: {str(exc)}",
        ) from exc
    logging.info(f"Imported customers from {file.filename}: {result.message}")
    return _import_response(result)


@router.get("/{customer_id}", response_model=CustomerModel, status_code=status.HTTP_200_OK)
def get_customer(
    customer_id: str,
    client: Any = Depends(get_store),
    identity: Identity = Depends(get_identity),
) -> CustomerModel:
    try:
        customer = customer_service.get_customer(client, customer_id)
        route_names = customer_service.route_names_for(client, [customer])
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error fetching customer {customer_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch customer: {str(exc)}",
        ) from exc
    return CustomerModel.from_customer(customer, route_names.get(customer.route_id))


@router.post("", response_model=CustomerModel, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreateRequest,
    client: Any = Depends(get_store),
    admin: Identity = Depends(require_admin),
) -> CustomerModel:
    try:
        customer = customer_service.create_customer(
            client,
            name=payload.name,
            route=payload.route,
            sales_executive=payload.salesExecutive,
            standard_unit_price=payload.standardUnitPrice,
            premium_unit_price=payload.premiumUnitPrice,
            phone=payload.phone,
        )
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error creating customer: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create customer: {str(exc)}",
        ) from exc
    route_names = customer_service.route_names_for(client, [customer])
    return CustomerModel.from_customer(customer, route_names.get(customer.route_id))


@router.put("/{customer_id}", response_model=CustomerModel, status_code=status.HTTP_200_OK)
def update_customer(
    customer_id: str,
    payload: CustomerUpdateRequest,
    client: Any = Depends(get_store),
    dispatcher: PropagationDispatcher = Depends(get_propagation_dispatcher),
    admin: Identity = Depends(require_admin),
) -> CustomerModel:
    changes = {
        "name": payload.name,
        "route": payload.route,
        "sales_executive": payload.salesExecutive,
        "standard_unit_price": payload.standardUnitPrice,
        "premium_unit_price": payload.premiumUnitPrice,
        "phone": payload.phone,
    }
    try:
        customer = customer_service.update_customer(client, customer_id, changes, dispatcher=dispatcher)
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error updating customer {customer_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update customer: {str(exc)}",
        ) from exc
    route_names = customer_service.route_names_for(client, [customer])
    return CustomerModel.from_customer(customer, route_names.get(customer.route_id))


@router.delete("/{customer_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def delete_customer(
    customer_id: str,
    client: Any = Depends(get_store),
    admin: Identity = Depends(require_admin),
) -> MessageResponse:
    try:
        customer_service.delete_customer(client, customer_id)
    except OrderDeskError as exc:
        raise_http(exc)
    except Exception as exc:
        logging.exception(f"Error deleting customer {customer_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete customer: {str(exc)}",
        ) from exc
    return MessageResponse(message="Customer deleted successfully")
