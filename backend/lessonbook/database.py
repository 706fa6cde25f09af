"""
LessonBook Backend — Document Store
=====================================

What:  The long-lived async MongoDB client, the database handle, and the
       FastAPI dependency that hands it to route handlers.
How:   `create_document_store()` builds an AsyncMongoClient once during the
       application lifespan; the resulting DocumentStore lives on
       `app.state.document_store` and is injected per request through
       `get_document_store`. Tests build the app with their own store.
Who:   Used by the collection resolver, the lesson/order routes and /health.

Connection Model:
    One AsyncMongoClient per process. The driver pools connections and is
    safe to share between concurrently running requests, so no locking is
    done here. Nothing is cached between requests: collection existence is
    re-checked on every call to `collection_exists`.
"""

import logging
from typing import Any, Optional

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from lessonbook.config import settings
from lessonbook.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Thin wrapper around an async MongoDB database.

    Attributes:
        database: AsyncDatabase (or a compatible stand-in in tests)
        client:   Owning AsyncMongoClient; None when the store does not own it
    """

    def __init__(self, database: Any, client: Optional[Any] = None):
        self.database = database
        self.client = client

    async def collection_exists(self, name: str) -> bool:
        """
        One metadata query: does `name` exist in the configured database?

        Raises:
            DatabaseError: the existence check itself failed (store unreachable)
        """
        try:
            names = await self.database.list_collection_names(filter={"name": name})
        except PyMongoError as e:
            logger.error("Error checking collection %r: %s", name, str(e))
            raise DatabaseError(
                context={"collection": name, "error_type": type(e).__name__},
            ) from e
        return len(names) > 0

    def collection(self, name: str) -> Any:
        """Live handle for `name`. Does not check existence."""
        return self.database[name]

    async def ping(self) -> None:
        await self.database.command("ping")

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
            logger.info("MongoDB client closed")


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
def create_document_store(
    uri: Optional[str] = None,
    db_name: Optional[str] = None,
) -> DocumentStore:
    """
    What:  Creates the process-wide client and binds the configured database.
    When:  Application startup (lifespan). The driver connects lazily, so an
           unreachable server surfaces on the first operation, not here.
    """
    uri = uri or settings.database_uri
    client = AsyncMongoClient(
        uri,
        serverSelectionTimeoutMS=settings.db_timeout_ms,
        appname="lessonbook",
    )
    database = client[db_name or settings.db_name]
    logger.info("MongoDB client created (database=%s)", database.name)
    return DocumentStore(database, client=client)


# ── Request Dependency ────────────────────────────────────────────────────
def get_document_store(request: Request) -> DocumentStore:
    """
    FastAPI dependency returning the store bound to the running app.

    Example usage in a route:
        @router.get("/lessons")
        async def list_lessons(store: DocumentStore = Depends(get_document_store)):
            ...
    """
    return request.app.state.document_store
