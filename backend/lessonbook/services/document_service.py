"""
LessonBook Backend — Document Service (CRUD Operations)
=========================================================

What:  The storage operations behind every route: list, limited listing,
       get, create, partial update, full replace, delete.
How:   A DocumentService is bound to one collection handle (from the
       collection resolver or a fixed domain collection) and speaks the
       async PyMongo collection API. Ids arrive already parsed by the
       document codec; results leave already serialized.
Who:   Called by routes/collections.py, routes/lessons.py, routes/orders.py.

Error Handling Strategy:
    Not-found conditions raise NotFoundError with a message naming the
    missing entity. Driver failures (PyMongoError) are logged and wrapped in
    DatabaseError so the client only sees the generic internal-error body.
    Anything else propagates to the catch-all handler.
"""

import logging
from typing import Any, Dict, List

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from lessonbook.exceptions import DatabaseError, NotFoundError
from lessonbook.services.document_codec import serialize_document

logger = logging.getLogger(__name__)


class DocumentService:
    """
    CRUD operations over a single collection.

    Attributes:
        collection:       async collection handle
        collection_name:  name used in log lines and error messages
    """

    def __init__(self, collection: Any, collection_name: str):
        self.collection = collection
        self.collection_name = collection_name

    def _database_error(self, operation: str, e: Exception) -> DatabaseError:
        logger.error(
            "Database error during %s on %r: %s",
            operation, self.collection_name, str(e),
        )
        return DatabaseError(
            context={
                "operation": operation,
                "collection": self.collection_name,
                "error_type": type(e).__name__,
            },
        )

    def _no_documents(self) -> NotFoundError:
        return NotFoundError(
            resource="collection",
            resource_id=self.collection_name,
            message=f'No documents found in collection "{self.collection_name}".',
        )

    def _document_not_found(self, document_id: ObjectId) -> NotFoundError:
        return NotFoundError(
            resource="document",
            resource_id=str(document_id),
            message=(
                f'Document with id "{document_id}" not found '
                f'in collection "{self.collection_name}".'
            ),
        )

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_all(self) -> List[Dict[str, Any]]:
        """All documents in store order. May be empty."""
        try:
            docs = await self.collection.find({}).to_list(length=None)
        except PyMongoError as e:
            raise self._database_error("find_all", e) from e
        return [serialize_document(d) for d in docs]

    async def list_all(self) -> List[Dict[str, Any]]:
        """
        All documents in store order.

        Raises:
            NotFoundError: the collection holds no documents. An empty
                collection is reported as absence, not as `[]`.
        """
        docs = await self.find_all()
        if not docs:
            raise self._no_documents()
        return docs

    async def list_limited(self, limit: int, sort_field: str) -> List[Dict[str, Any]]:
        """
        At most `limit` documents sorted by `sort_field` descending.

        Raises:
            NotFoundError: no documents matched
        """
        try:
            cursor = self.collection.find({}).sort(sort_field, DESCENDING).limit(limit)
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise self._database_error("list_limited", e) from e
        if not docs:
            raise self._no_documents()
        return [serialize_document(d) for d in docs]

    async def get(self, document_id: ObjectId) -> Dict[str, Any]:
        try:
            doc = await self.collection.find_one({"_id": document_id})
        except PyMongoError as e:
            raise self._database_error("get", e) from e
        if doc is None:
            raise self._document_not_found(document_id)
        return serialize_document(doc)

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, fields: Dict[str, Any]) -> str:
        """
        Insert a new document and return its store-assigned id.

        The driver writes `_id` into the dict it is given, so a copy is
        inserted and the caller's payload stays untouched.
        """
        document = dict(fields)
        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as e:
            raise self._database_error("create", e) from e
        inserted_id = str(result.inserted_id)
        logger.info("Created document %s in %r", inserted_id, self.collection_name)
        return inserted_id

    async def update(self, document_id: ObjectId, fields: Dict[str, Any]) -> Dict[str, int]:
        """
        Partial update: `$set` the supplied fields, leave the rest untouched.

        Raises:
            NotFoundError: no document has `document_id`. A match that
                changes nothing (same values) is still a success.
        """
        try:
            result = await self.collection.update_one({"_id": document_id}, {"$set": fields})
        except PyMongoError as e:
            raise self._database_error("update", e) from e
        if result.matched_count == 0:
            raise self._document_not_found(document_id)
        logger.info(
            "Updated document %s in %r (%d modified)",
            document_id, self.collection_name, result.modified_count,
        )
        return {"matched": result.matched_count, "modified": result.modified_count}

    async def replace(self, document_id: ObjectId, document: Dict[str, Any]) -> Dict[str, int]:
        """Full replace: every field except `_id` is overwritten by `document`."""
        try:
            result = await self.collection.replace_one({"_id": document_id}, document)
        except PyMongoError as e:
            raise self._database_error("replace", e) from e
        if result.matched_count == 0:
            raise self._document_not_found(document_id)
        logger.info("Replaced document %s in %r", document_id, self.collection_name)
        return {"matched": result.matched_count, "modified": result.modified_count}

    async def delete(self, document_id: ObjectId) -> None:
        try:
            result = await self.collection.delete_one({"_id": document_id})
        except PyMongoError as e:
            raise self._database_error("delete", e) from e
        if result.deleted_count == 0:
            raise self._document_not_found(document_id)
        logger.info("Deleted document %s from %r", document_id, self.collection_name)
