"""
LessonBook Backend — Route Dependencies
=========================================

What:  FastAPI dependencies shared by the route modules.

    resolve_collection:  the collection resolver for /collections/{collection_name}
    parse_document_id:   the document codec applied to the {document_id} segment
    read_json_body:      the request body, decoded only after the resolver ran
    bind_collection:     fixed-collection binding for the lesson and order routes

FastAPI resolves a route's dependencies in parameter order, so declaring
the collection before the id means an unknown collection is answered with
404 before the id is even parsed. The generic write routes read their
body through `read_json_body` for the same reason: a declared Body
parameter is decoded before any dependency runs.
"""

import logging
from typing import Any, Dict

from bson import ObjectId
from fastapi import Depends, Path, Request

from lessonbook.database import DocumentStore, get_document_store
from lessonbook.exceptions import NotFoundError, ValidationError
from lessonbook.services.document_codec import parse_object_id
from lessonbook.services.document_service import DocumentService

logger = logging.getLogger(__name__)


async def resolve_collection(
    collection_name: str = Path(min_length=1, description="Name of an existing collection"),
    store: DocumentStore = Depends(get_document_store),
) -> DocumentService:
    """
    Confirm the collection exists and bind a DocumentService to it.

    One metadata query per request, never cached: a collection dropped
    between two requests is reported missing on the second one.

    Raises:
        NotFoundError: collection does not exist (→ 404)
        DatabaseError: the existence check failed (→ 500)
    """
    if not await store.collection_exists(collection_name):
        logger.info("Unknown collection requested: %r", collection_name)
        raise NotFoundError(
            resource="collection",
            resource_id=collection_name,
            message=f'Collection "{collection_name}" does not exist.',
        )
    return DocumentService(store.collection(collection_name), collection_name)


def parse_document_id(
    document_id: str = Path(description="24-character hex document identifier"),
) -> ObjectId:
    """Parse the id segment; malformed ids fail with 400 before any lookup."""
    return parse_object_id(document_id)


def bind_collection(collection_name: str):
    """
    Dependency factory for the routes that always use one fixed collection
    (/lessons, /orders). No existence check: inserting into a missing
    collection creates it, and reading one yields no documents.
    """

    def _bind(store: DocumentStore = Depends(get_document_store)) -> DocumentService:
        return DocumentService(store.collection(collection_name), collection_name)

    return _bind


async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    Decode the body as a JSON object.

    Raises:
        ValidationError: body missing, not JSON, or not an object (→ 400)
    """
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError(message="Invalid request body.", field="body")
    if not isinstance(payload, dict):
        raise ValidationError(message="Invalid request body.", field="body")
    return payload
