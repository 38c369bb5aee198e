"""nvl SDK public surface."""

from nvl_sdk.client import AuthorityClient, ScopesAPI, validate_issuer_url
from nvl_sdk.errors import (
    AuthorityRequestError,
    AuthorityUnavailableError,
    ClientConfigurationError,
    DiscoveryRequiredError,
    NVLSDKError,
    ProtectedScopeError,
    SchemaValidationError,
    ScopeResolutionError,
)
from nvl_sdk.policy import (
    PROTECTED_SCOPES,
    check_scope_delete,
    check_scope_rename,
    is_protected_scope,
)
from nvl_sdk.schemas import ProviderConfiguration, Scope, ScopeInput

__all__ = [
    "NVLSDKError",
    "AuthorityClient",
    "ScopesAPI",
    "validate_issuer_url",
    "AuthorityUnavailableError",
    "AuthorityRequestError",
    "ClientConfigurationError",
    "DiscoveryRequiredError",
    "SchemaValidationError",
    "ProtectedScopeError",
    "ScopeResolutionError",
    "PROTECTED_SCOPES",
    "is_protected_scope",
    "check_scope_rename",
    "check_scope_delete",
    "ProviderConfiguration",
    "Scope",
    "ScopeInput",
]
