# Middleware package init
"""
Copydesk Backend — Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [CORS] → [Request ID] → [Logging] → Route Handler

    1. CORS first: OPTIONS is answered before any other processing, and every
       response (errors included) leaves with the CORS headers
    2. Request ID: correlation ID for logging and the X-Request-ID header
    3. Logging: method, path, status, duration with the request ID
"""
