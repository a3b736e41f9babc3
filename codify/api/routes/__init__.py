"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Each mutating handler opens exactly one transaction() and runs every
      statement of the operation on it
"""
