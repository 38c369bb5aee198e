"""Authorization service payload schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ProviderConfiguration(BaseModel):
    """OpenID provider metadata returned by discovery."""

    model_config = ConfigDict(extra="allow")

    issuer: str
    authorization_endpoint: Optional[str] = None
    token_endpoint: Optional[str] = None
    userinfo_endpoint: Optional[str] = None
    jwks_uri: Optional[str] = None
    registration_endpoint: Optional[str] = None
    scopes_supported: Optional[List[str]] = None


class ScopeInput(BaseModel):
    """Writable scope fields submitted on create and update."""

    model_config = ConfigDict(extra="forbid")

    name: str
    description: Optional[str] = None
    restricted: Optional[bool] = None

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


class Scope(ScopeInput):
    model_config = ConfigDict(extra="ignore")

    # Epoch milliseconds, set by the service.
    created: Optional[float] = None
    modified: Optional[float] = None
