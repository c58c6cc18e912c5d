# Services package init
"""
Notes API — Services Layer
===========================

What:  The document store client, sitting between routes (HTTP) and the
       database session.

Service Inventory:
    - object_id:    generation and parsing of 24-hex document ids
    - note_service: NoteService, the CRUD client for note documents
"""
