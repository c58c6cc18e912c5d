# Routes package init
"""
Notes API — API Routes Package
===============================

Route Inventory:
    - notes.py:    GET/POST /api/notes, GET/PUT/DELETE /api/notes/{id}
    - health.py:   GET /health
    - frontend.py: GET / (frontend entry), static files, unknown endpoint

Routes stay thin: they read the request, call the note service, and pick
the status code. Registration order matters: frontend.py holds the
catch-all and is always included last.
"""
