# Routes package init
"""
JournalApp Backend — API Routes Package
=========================================

Route Inventory:
    - users.py:    POST /api/users/register, POST /api/users/login,
                   GET  /api/users/profile
    - journal.py:  GET/POST /api/journal, GET /api/journal/search,
                   GET /api/journal/streak,
                   GET/PUT/DELETE /api/journal/{id}
    - health.py:   GET /health, GET /

Design Principle:
    Routes are THIN — they extract request data, resolve the caller, call a
    service, and let the global handlers turn exceptions into responses.
"""
