# Middleware package init
"""
Wedding Gallery Backend — Middleware Package
==============================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so every later log line can carry it
    - Logging measures the full downstream duration and final status
    - CORS is FastAPI's CORSMiddleware with the configured allow-list
"""
