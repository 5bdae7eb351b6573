# Routes package init
"""
FitGroup Backend — API Routes Package
=====================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource.

Route Inventory:
    - groups.py:        /groups, /groups/{id}, likes, rank
    - participants.py:  /groups/{id}/participants (join / leave)
    - records.py:       /groups/{id}/records
    - tags.py:          /tags
    - images.py:        /images
    - health.py:        /health

Design Principle:
    Routes are THIN: extract data from the request, call a service with the
    request's session, format the response. Business rules live in services.
"""
