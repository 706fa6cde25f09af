# Middleware package init
"""
LessonBook Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first: every later log line can carry the correlation id
    - Logging: records method, path, status and duration once the response exists
"""
