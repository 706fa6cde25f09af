"""
LessonBook Backend — Lesson Route Handlers
============================================

What:  GET /lessons (catalogue) and PUT /lessons/{document_id} (partial update).
Who:   Called by the booking frontend to render lessons and adjust spaces.

Unlike GET /collections/lessons, the catalogue answers 200 with `[]` when
no lessons exist.
"""

import logging
from typing import Any, Dict, List

from bson import ObjectId
from fastapi import APIRouter, Body, Depends

from lessonbook.routes.dependencies import bind_collection, parse_document_id
from lessonbook.schemas.documents import ErrorResponse, UpdatedResponse
from lessonbook.services.document_service import DocumentService
from lessonbook.services.validators import validate_lesson

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lessons", tags=["Lessons"])

lessons_collection = bind_collection("lessons")


@router.get(
    "",
    response_model=List[Dict[str, Any]],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all lessons",
)
async def list_lessons(
    service: DocumentService = Depends(lessons_collection),
) -> List[Dict[str, Any]]:
    return await service.find_all()


@router.put(
    "/{document_id}",
    response_model=UpdatedResponse,
    responses={
        400: {"description": "Malformed id or invalid lesson fields", "model": ErrorResponse},
        404: {"description": "Lesson not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update fields of a lesson",
    description=(
        "Partial update: e.g. `{\"spaces\": 3}` changes the available spaces and "
        "leaves subject, location, price and image untouched. `spaces` must be "
        "an integer of at least 0."
    ),
)
async def update_lesson(
    payload: Dict[str, Any] = Body(...),
    oid: ObjectId = Depends(parse_document_id),
    service: DocumentService = Depends(lessons_collection),
) -> UpdatedResponse:
    fields = validate_lesson(payload)
    counts = await service.update(oid, fields)
    return UpdatedResponse(message="Lesson updated successfully.", **counts)
