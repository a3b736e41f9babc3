"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes translate requests into service calls; no relational logic here

Design Decisions:
    - Thin routes delegate to services (functional core, imperative shell)
"""
