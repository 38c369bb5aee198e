from __future__ import annotations

import pytest

from nvl_sdk.errors import ProtectedScopeError
from nvl_sdk.policy import (
    PROTECTED_SCOPES,
    check_scope_delete,
    check_scope_rename,
    is_protected_scope,
)


def test_protected_set_is_exactly_the_identity_scopes() -> None:
    assert PROTECTED_SCOPES == {"openid", "profile", "email", "address", "phone", "realm"}


@pytest.mark.parametrize("name", ["OpenID", "openid ", "read:files", "profiles", ""])
def test_membership_is_exact_and_case_sensitive(name: str) -> None:
    assert is_protected_scope(name) is False


@pytest.mark.parametrize("name", sorted(PROTECTED_SCOPES))
def test_protected_scope_cannot_be_renamed(name: str) -> None:
    with pytest.raises(ProtectedScopeError, match="cannot be updated with a new name"):
        check_scope_rename(name, f"{name}2")


@pytest.mark.parametrize("name", sorted(PROTECTED_SCOPES))
def test_protected_scope_keeps_name_on_update(name: str) -> None:
    check_scope_rename(name, name)


@pytest.mark.parametrize("name", sorted(PROTECTED_SCOPES))
def test_protected_scope_cannot_be_deleted(name: str) -> None:
    with pytest.raises(ProtectedScopeError, match="cannot be deleted"):
        check_scope_delete(name)


def test_unprotected_scope_can_be_renamed_and_deleted() -> None:
    check_scope_rename("read:files", "write:files")
    check_scope_delete("read:files")


def test_policy_error_has_no_status_code() -> None:
    with pytest.raises(ProtectedScopeError) as excinfo:
        check_scope_delete("openid")
    assert getattr(excinfo.value, "status_code", None) is None
