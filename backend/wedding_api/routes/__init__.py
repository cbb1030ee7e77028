# Routes package init
"""
Wedding Gallery Backend — API Routes Package
==============================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - media.py:      POST /upload?event=E      (store an image)
                     GET  /images/{event}      (list image URLs)
    - blessings.py:  POST /api/blessings       (leave a blessing)
                     GET  /api/blessings       (list blessings)
    - health.py:     GET  /health              (service health check)

Routes stay thin: extract request data, call a service, return its result.
Errors are raised, never formatted here; main.py's handlers own the JSON.
"""
