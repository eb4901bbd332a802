# Middleware package init
"""
CivicMap Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first: client IDs are sanitised, every later log line carries it
    - Logging: status, duration and size; ACCESS_LOG_SKIP_PATHS opts paths out
    - CORS: applied by FastAPI's CORSMiddleware (handles preflight)
"""
