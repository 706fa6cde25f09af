# Services package init
"""
LessonBook Backend — Services Layer
=====================================

What:  Storage operations and validation sitting between routes (HTTP) and
       the document store (persistence).

Service Inventory:
    - document_codec:    wire id ⇄ ObjectId, stored document → JSON
    - document_service:  DocumentService, CRUD over one collection handle
    - validators:        lesson and order shape checks, per-collection registry
"""
