"""
LessonBook Backend — Generic Collection Routes
================================================

What:  Pass-through CRUD over any existing collection.

    GET    /collections/{collection_name}                 list all (404 when empty)
    GET    /collections/{collection_name}/limited         top N by price desc
    GET    /collections/{collection_name}/{document_id}   get one
    POST   /collections/{collection_name}                 create
    PUT    /collections/{collection_name}/{document_id}   partial update ($set)
    DELETE /collections/{collection_name}/{document_id}   delete

How:   Every route depends on `resolve_collection`, so nothing here runs for
       an unknown collection. Writes to `lessons` and `orders` go through the
       same domain validators as the dedicated lesson/order routes.
"""

import logging
from typing import Any, Dict, List

from bson import ObjectId
from fastapi import APIRouter, Depends, status

from lessonbook.config import settings
from lessonbook.routes.dependencies import parse_document_id, read_json_body, resolve_collection
from lessonbook.schemas.documents import (
    CreatedResponse,
    ErrorResponse,
    MessageResponse,
    UpdatedResponse,
)
from lessonbook.services.document_service import DocumentService
from lessonbook.services.validators import validator_for_create, validator_for_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/collections", tags=["Collections"])

_ERRORS = {
    404: {"description": "Collection or document not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
_ID_ERRORS = {400: {"description": "Malformed id or body", "model": ErrorResponse}, **_ERRORS}
_JSON_OBJECT_BODY = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": {"type": "object"}}},
    }
}


@router.get(
    "/{collection_name}",
    response_model=List[Dict[str, Any]],
    responses=_ERRORS,
    summary="List every document in a collection",
)
async def list_documents(
    service: DocumentService = Depends(resolve_collection),
) -> List[Dict[str, Any]]:
    return await service.list_all()


# Declared before /{document_id} so "limited" is not taken for an id
@router.get(
    "/{collection_name}/limited",
    response_model=List[Dict[str, Any]],
    responses=_ERRORS,
    summary="List the highest-priced documents",
    description="Returns at most 3 documents sorted by `price`, highest first.",
)
async def list_limited_documents(
    service: DocumentService = Depends(resolve_collection),
) -> List[Dict[str, Any]]:
    return await service.list_limited(
        limit=settings.limited_count,
        sort_field=settings.limited_sort_field,
    )


@router.get(
    "/{collection_name}/{document_id}",
    response_model=Dict[str, Any],
    responses=_ID_ERRORS,
    summary="Get one document by id",
)
async def get_document(
    service: DocumentService = Depends(resolve_collection),
    oid: ObjectId = Depends(parse_document_id),
) -> Dict[str, Any]:
    return await service.get(oid)


@router.post(
    "/{collection_name}",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Empty or invalid body", "model": ErrorResponse}, **_ERRORS},
    summary="Create a document",
    openapi_extra=_JSON_OBJECT_BODY,
)
async def create_document(
    service: DocumentService = Depends(resolve_collection),
    payload: Dict[str, Any] = Depends(read_json_body),
) -> CreatedResponse:
    fields = validator_for_create(service.collection_name)(payload)
    new_id = await service.create(fields)
    return CreatedResponse(message="Document created successfully.", id=new_id)


@router.put(
    "/{collection_name}/{document_id}",
    response_model=UpdatedResponse,
    responses=_ID_ERRORS,
    summary="Update fields of a document",
    description="Only the supplied fields change; all other fields keep their values.",
    openapi_extra=_JSON_OBJECT_BODY,
)
async def update_document(
    service: DocumentService = Depends(resolve_collection),
    oid: ObjectId = Depends(parse_document_id),
    payload: Dict[str, Any] = Depends(read_json_body),
) -> UpdatedResponse:
    fields = validator_for_update(service.collection_name)(payload)
    counts = await service.update(oid, fields)
    return UpdatedResponse(message="Document updated successfully.", **counts)


@router.delete(
    "/{collection_name}/{document_id}",
    response_model=MessageResponse,
    responses=_ID_ERRORS,
    summary="Delete a document",
)
async def delete_document(
    service: DocumentService = Depends(resolve_collection),
    oid: ObjectId = Depends(parse_document_id),
) -> MessageResponse:
    await service.delete(oid)
    return MessageResponse(message="Document deleted successfully.")
