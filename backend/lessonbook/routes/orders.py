"""
LessonBook Backend — Order Route Handlers
===========================================

What:  Order placement and order replacement.

    POST /orders              create (validated)
    POST /order               same handler, kept for older clients
    PUT  /order/{document_id} full replace (all required fields re-supplied)

How:   Bodies go through `validate_order`, which accepts either order
       sub-kind (lessonIDs + spaces, or lessons + address). Invalid bodies
       are logged and answered with a generic 400.

Placing an order does not touch lesson spaces; clients adjust them with
PUT /lessons/{id}.
"""

import logging
from typing import Any, Dict

from bson import ObjectId
from fastapi import APIRouter, Body, Depends, status

from lessonbook.routes.dependencies import bind_collection, parse_document_id
from lessonbook.schemas.documents import CreatedResponse, ErrorResponse, UpdatedResponse
from lessonbook.services.document_service import DocumentService
from lessonbook.services.validators import validate_order

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Orders"])

orders_collection = bind_collection("orders")

_ERRORS = {
    400: {"description": "Invalid order format", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.post(
    "/orders",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Place an order",
)
@router.post(
    "/order",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    include_in_schema=False,
)
async def create_order(
    payload: Dict[str, Any] = Body(...),
    service: DocumentService = Depends(orders_collection),
) -> CreatedResponse:
    order = validate_order(payload)
    new_id = await service.create(order)
    logger.info("Order %s placed by %r", new_id, order["name"])
    return CreatedResponse(message="Order created successfully.", id=new_id)


@router.put(
    "/order/{document_id}",
    response_model=UpdatedResponse,
    responses={404: {"description": "Order not found", "model": ErrorResponse}, **_ERRORS},
    summary="Replace an order",
    description="Full replace: every required order field must be supplied again.",
)
async def replace_order(
    payload: Dict[str, Any] = Body(...),
    oid: ObjectId = Depends(parse_document_id),
    service: DocumentService = Depends(orders_collection),
) -> UpdatedResponse:
    order = validate_order(payload)
    counts = await service.replace(oid, order)
    return UpdatedResponse(message="Order updated successfully.", **counts)
