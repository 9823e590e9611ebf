# Middleware package init
"""
TutorMatch Backend: Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Session] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so every later log line can carry it
    - Logging captures response status and duration on the way out
    - Session decodes/re-signs the cookie around the route handler
"""
