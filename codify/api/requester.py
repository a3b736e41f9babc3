"""Requester Identity — the authenticated user id handed over by the gateway.

Invariants:
    - The upstream authentication layer verifies the bearer token and forwards
      the subject as X-Requester-Id; this service trusts that value
    - A missing header is an UnauthorizedActorError, never an anonymous call
"""

from fastapi import Header

from codify.core.errors import UnauthorizedActorError

REQUESTER_HEADER = "X-Requester-Id"


async def get_requester_id(
    requester_id: int | None = Header(None, alias=REQUESTER_HEADER),
) -> int:
    if requester_id is None:
        raise UnauthorizedActorError("Authentication required.")
    return requester_id
