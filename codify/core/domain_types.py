"""Domain Types — identity types that replace bare ints across the codebase.

Invariants:
    - UserId, ProjectId, TechnologyId wrap database integer keys
    - Never mix identity kinds in one signature without naming them

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
"""

from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
ProjectId = NewType("ProjectId", int)
TechnologyId = NewType("TechnologyId", int)
