"""Infrastructure Layer — connection pool, transaction scope, logging setup.

Invariants:
    - Infrastructure never imports from services/
    - All storage exceptions leave this layer as StorageFailure
"""
