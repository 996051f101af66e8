from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from customer_update.api.dependencies import (
    get_app_settings,
    get_db,
    get_external_validator,
)
from customer_update.api.schemas import ApiResponse
from customer_update.config import Settings
from customer_update.errors import DUPLICATE_TAX_ID_MESSAGE
from customer_update.schemas.customers import CustomerItem, CustomerPayload, TaxIdCheck
from customer_update.services import customers_service
from customer_update.services.external_validator import ExternalValidator
from customer_update.services.field_validation import is_valid_tax_id_format

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=ApiResponse[List[CustomerItem]], summary="List customers")
def list_customers(db: Session = Depends(get_db)) -> JSONResponse:
    customers = customers_service.list_customers(db)
    return ApiResponse[List[CustomerItem]](
        success=True,
        message="Customers retrieved successfully",
        data=[CustomerItem.model_validate(c) for c in customers],
    ).to_response()


@router.get(
    "/validate-tax-id/{tax_id}",
    response_model=ApiResponse[TaxIdCheck],
    summary="Check whether a tax id is still available",
)
def validate_tax_id(tax_id: str, db: Session = Depends(get_db)) -> JSONResponse:
    if not customers_service.check_tax_id_available(db, tax_id):
        return ApiResponse(
            success=False,
            message="Tax ID already exists",
            error=DUPLICATE_TAX_ID_MESSAGE,
        ).to_response(400)

    return ApiResponse[TaxIdCheck](
        success=True,
        message="Tax ID is available",
        data=TaxIdCheck(is_valid=is_valid_tax_id_format(tax_id), exists=False),
    ).to_response()


@router.get("/{customer_id}", response_model=ApiResponse[CustomerItem], summary="Get customer")
def get_customer(customer_id: int, db: Session = Depends(get_db)) -> JSONResponse:
    customer = customers_service.get_customer(db, customer_id)
    return ApiResponse[CustomerItem](
        success=True,
        message="Customer retrieved successfully",
        data=CustomerItem.model_validate(customer),
    ).to_response()


@router.post(
    "",
    response_model=ApiResponse[CustomerItem],
    status_code=201,
    summary="Create customer (runs external validation)",
)
def create_customer(
    payload: CustomerPayload,
    request: Request,
    db: Session = Depends(get_db),
    validator: ExternalValidator = Depends(get_external_validator),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    customer = customers_service.create_customer(
        db,
        payload,
        validator=validator,
        validation_timeout=settings.external_validation_timeout_seconds,
    )
    location = str(request.url_for("get_customer", customer_id=customer.id))
    return ApiResponse[CustomerItem](
        success=True,
        message="Customer created successfully",
        data=CustomerItem.model_validate(customer),
    ).to_response(201, headers={"Location": location})


@router.put("/{customer_id}", response_model=ApiResponse[CustomerItem], summary="Update customer")
def update_customer(
    customer_id: int,
    payload: CustomerPayload,
    db: Session = Depends(get_db),
) -> JSONResponse:
    customer = customers_service.update_customer(db, customer_id, payload)
    return ApiResponse[CustomerItem](
        success=True,
        message="Customer updated successfully",
        data=CustomerItem.model_validate(customer),
    ).to_response()


@router.delete("/{customer_id}", response_model=ApiResponse[dict], summary="Delete customer")
def delete_customer(customer_id: int, db: Session = Depends(get_db)) -> JSONResponse:
    customers_service.delete_customer(db, customer_id)
    return ApiResponse(success=True, message="Customer deleted successfully").to_response()
