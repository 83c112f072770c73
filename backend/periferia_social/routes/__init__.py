# Routes package init
"""
Periferia Social Backend — API Routes Package
==============================================

Route Inventory:
    - auth.py:    POST /api/auth/login, POST /api/auth/change-password
    - users.py:   GET  /api/users/me
    - posts.py:   GET/POST /api/posts, PUT/DELETE /api/posts/{id},
                  POST /api/posts/{id}/like
    - health.py:  GET  /health

Design Principle:
    Routes are THIN. They parse the request, resolve the caller through
    get_current_user_id, call a service, and pick the status code.
"""
