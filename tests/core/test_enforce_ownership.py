"""Ownership Guards — pure equality checks raising typed errors."""

import pytest

from codify.core.enforce_ownership import (
    ensure_acting_as, ensure_creator, ensure_not_self,
)
from codify.core.errors import (
    ErrorCategory, InvalidOperationError, UnauthorizedActorError,
)


def test_acting_as_self_passes():
    ensure_acting_as(4, 4)


def test_acting_as_someone_else_is_unauthorized():
    with pytest.raises(UnauthorizedActorError) as exc_info:
        ensure_acting_as(4, 5)
    assert exc_info.value.kind is ErrorCategory.INVALID_OPERATION
    assert exc_info.value.http_status == 401


def test_creator_passes():
    ensure_creator(1, 1, project_id=7)


def test_non_creator_is_unauthorized():
    with pytest.raises(UnauthorizedActorError) as exc_info:
        ensure_creator(2, 1, project_id=7)
    assert exc_info.value.context.project_id == 7


def test_checks_are_independent():
    # Acting as yourself does not make you the creator
    ensure_acting_as(2, 2)
    with pytest.raises(UnauthorizedActorError):
        ensure_creator(2, 1)


def test_self_reference_is_invalid_operation():
    with pytest.raises(InvalidOperationError) as exc_info:
        ensure_not_self(5, 5)
    assert exc_info.value.code == "SELF_REFERENCE"
    assert exc_info.value.http_status == 422


def test_distinct_users_pass_self_check():
    ensure_not_self(5, 6)
