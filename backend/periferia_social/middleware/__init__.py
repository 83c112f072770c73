# Middleware package init
"""
Periferia Social Backend — Middleware Package
==============================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID first: every later log line can carry the correlation id
    2. Logging: measures status and duration of everything below it
    3. CORS: FastAPI's CORSMiddleware answers preflight requests from the SPA

    Authentication is NOT middleware: it is the get_current_user_id
    dependency, so the login route can opt out simply by not declaring it.
"""
