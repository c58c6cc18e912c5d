# Middleware package init
"""
Notes API — Middleware Package
===============================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation id for log lines and error handlers
    2. Logging: method, path, status and duration, tagged with the request id
    3. GZip / CORS: Starlette middleware configured in main.create_app()
"""
