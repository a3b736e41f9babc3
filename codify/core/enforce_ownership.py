"""Ownership Guards — pure checks run before any storage write.

Invariants:
    - Every guard either returns None or raises; no guard touches storage
    - ensure_acting_as and ensure_creator are independent equality checks;
      edit flows call both, never a combined boolean expression
    - ensure_not_self rejects source == target for user-to-user edges only
"""

from codify.core.errors import (
    ErrorContext, InvalidOperationError, UnauthorizedActorError,
)


def ensure_acting_as(claimed_id: int, requester_id: int) -> None:
    """The subject named in the request must be the authenticated requester."""
    if claimed_id != requester_id:
        raise UnauthorizedActorError(
            "You're not allowed to act on behalf of this user.",
            ErrorContext(user_id=requester_id),
        )


def ensure_creator(
    requester_id: int, creator_id: int, project_id: int | None = None,
) -> None:
    """Only the creator of a project may modify or delete it."""
    if requester_id != creator_id:
        raise UnauthorizedActorError(
            "You're not allowed to modify this project.",
            ErrorContext(user_id=requester_id, project_id=project_id),
        )


def ensure_not_self(source_id: int, target_id: int) -> None:
    """A user can never be its own favorite."""
    if source_id == target_id:
        raise InvalidOperationError(
            "A user cannot reference themselves as a favorite.",
            code="SELF_REFERENCE",
            context=ErrorContext(user_id=source_id),
        )
