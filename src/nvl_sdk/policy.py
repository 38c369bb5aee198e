"""Protected scope policy."""

from __future__ import annotations

from nvl_sdk.errors import ProtectedScopeError

# Scopes the identity layer of the service depends on.
PROTECTED_SCOPES: frozenset[str] = frozenset(
    {"openid", "profile", "email", "address", "phone", "realm"}
)


def is_protected_scope(name: str) -> bool:
    return name in PROTECTED_SCOPES


def check_scope_rename(current: str, requested: str) -> None:
    """Reject renaming a protected scope. Other fields stay editable."""
    if is_protected_scope(current) and requested != current:
        raise ProtectedScopeError("This scope cannot be updated with a new name")


def check_scope_delete(name: str) -> None:
    if is_protected_scope(name):
        raise ProtectedScopeError("This scope cannot be deleted")


__all__ = [
    "PROTECTED_SCOPES",
    "is_protected_scope",
    "check_scope_rename",
    "check_scope_delete",
]
