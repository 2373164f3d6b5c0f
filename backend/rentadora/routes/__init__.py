# Routes package init
"""
Rentadora API - Routes Package
===============================

What:  HTTP route handlers that accept requests and return responses.
How:   health.py is a plain module-level router; resources.py builds one
       router per ResourceDefinition at application start.

Route Inventory:
    - health.py:     GET /                      (welcome text)
                     GET /health                (store connectivity)
    - resources.py:  POST   /{recurso}          (create)
                     GET    /{recurso}/{id}     (read)
                     PUT    /{recurso}/{id}     (merge update)
                     DELETE /{recurso}/{id}     (delete)

Routes stay thin: read the body, call the ResourceService, return its
result. Status codes for failures come from the exception handlers in
main.py.
"""
