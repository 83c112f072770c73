# Services package init
"""
Periferia Social Backend — Services Layer
==========================================

What:  Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - CredentialStore: bcrypt hashing and verification (passlib)
    - TokenService:    signed, one-hour bearer tokens (python-jose)
    - authorization:   the shared ownership predicate
    - AuthService:     login and password change
    - UserService:     profile lookup and account creation
    - PostService:     feed, post mutations, likes

Services never write HTTP responses; they raise PeriferiaError subclasses
and main.py translates them.
"""
