# Routes package init
"""
Copydesk Backend — API Routes Package
=======================================

Route Inventory:
    - auth.py:     POST /api/figma/auth      (log in, obtain bearer token)
    - verify.py:   GET  /api/figma/verify    (check a bearer token)
    - analyze.py:  POST /api/figma/analyze   (content standards review)
    - health.py:   GET  /health              (service health check)

Routes stay THIN: read the request, call a service, return its result.
Status codes for failures come from the exception handlers in main.py.
"""
