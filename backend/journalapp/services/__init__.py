# Services package init
"""
JournalApp Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Separation of concerns — routes handle HTTP, services handle business rules.
How:   Services receive the request's db session and the caller's id, apply
       ownership and validation rules, and return response schemas.

Service Inventory:
    - EntryService: Journal entry CRUD, search and streak
    - UserService: Registration, login and profile

Why services are separate from routes:
    1. Testability: Services can be unit-tested with a mocked session
    2. Reusability: The same rules apply whichever route calls them
"""
