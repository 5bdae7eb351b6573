# Middleware package init
"""
FitGroup Backend — Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: generate the correlation ID first
    2. Logging: log method, path, status and duration with that ID
    3. GZip / CORS: FastAPI-provided response middleware

    The order is reversed for responses, so the request ID header is set on
    every response and the logged duration covers the whole handler.
"""
