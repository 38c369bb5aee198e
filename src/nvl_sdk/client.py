"""Thin client for the authorization service scope endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from urllib.parse import quote, urlparse

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from nvl_sdk.errors import (
    AuthorityRequestError,
    AuthorityUnavailableError,
    ClientConfigurationError,
    DiscoveryRequiredError,
    SchemaValidationError,
)
from nvl_sdk.schemas import ProviderConfiguration, Scope, ScopeInput

logger = logging.getLogger(__name__)

DISCOVERY_PATH = "/.well-known/openid-configuration"
SCOPES_PATH = "/v1/scopes"


def validate_issuer_url(url: str) -> str:
    parsed = urlparse(url or "")
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ClientConfigurationError(f"invalid issuer url: {url!r}")
    return url


@dataclass
class AuthorityClient:
    issuer: str
    access_token: str | None = None
    timeout: float = 10.0
    retries: int = 2
    configuration: ProviderConfiguration | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        validate_issuer_url(self.issuer)

        self._session = requests.Session()
        retry = Retry(
            total=max(0, int(self.retries)),
            connect=max(0, int(self.retries)),
            read=max(0, int(self.retries)),
            status=max(0, int(self.retries)),
            status_forcelist=(429, 500, 502, 503, 504),
            backoff_factor=0.2,
            allowed_methods=("GET", "DELETE"),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)
        self.scopes = ScopesAPI(self)

    def _url(self, path: str) -> str:
        return f"{self.issuer.rstrip('/')}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_payload: dict | None = None,
        token: str | None = None,
    ) -> object:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                json=json_payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AuthorityUnavailableError(str(exc)) from exc

        logger.debug("%s %s -> %s", method, url, response.status_code)
        if response.status_code >= 400:
            body: object | None = None
            detail: object | None = None
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                detail = body.get("error_description") or body.get("error") or body.get("detail")
            if isinstance(detail, str):
                message = f"request failed: {response.status_code} {detail}"
            else:
                message = f"request failed: {response.status_code} {response.text}"
            raise AuthorityRequestError(
                message,
                status_code=response.status_code,
                detail=detail,
                body=body,
            )
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise SchemaValidationError(f"response from {url} is not JSON") from exc

    def discover(self) -> ProviderConfiguration:
        payload = self._request("GET", DISCOVERY_PATH)
        try:
            configuration = ProviderConfiguration.model_validate(payload)
        except ValidationError as exc:
            raise SchemaValidationError(f"invalid provider configuration: {exc}") from exc
        self.configuration = configuration
        return configuration

    def require_discovery(self) -> ProviderConfiguration:
        if self.configuration is None:
            raise DiscoveryRequiredError("discover() must complete before resource calls")
        return self.configuration


class ScopesAPI:
    """Scope CRUD bound to an :class:`AuthorityClient`."""

    def __init__(self, client: AuthorityClient) -> None:
        self._client = client

    def _call(self, method: str, path: str, *, token: str | None, payload: dict | None = None):
        self._client.require_discovery()
        return self._client._request(method, path, json_payload=payload, token=token)

    @staticmethod
    def _path(name: str) -> str:
        return f"{SCOPES_PATH}/{quote(name, safe='')}"

    @staticmethod
    def _parse(payload: object) -> Scope:
        try:
            return Scope.model_validate(payload)
        except ValidationError as exc:
            raise SchemaValidationError(f"invalid scope payload: {exc}") from exc

    def create(self, data: ScopeInput, *, token: str | None = None) -> Scope:
        return self._parse(self._call("POST", SCOPES_PATH, token=token, payload=data.to_payload()))

    def list(self, *, token: str | None = None) -> list[Scope]:
        payload = self._call("GET", SCOPES_PATH, token=token)
        if not isinstance(payload, list):
            raise SchemaValidationError("scope listing must be a JSON array")
        return [self._parse(item) for item in payload]

    def get(self, name: str, *, token: str | None = None) -> Scope:
        return self._parse(self._call("GET", self._path(name), token=token))

    def update(self, name: str, data: ScopeInput, *, token: str | None = None) -> Scope:
        return self._parse(
            self._call("PATCH", self._path(name), token=token, payload=data.to_payload())
        )

    def delete(self, name: str, *, token: str | None = None) -> None:
        self._call("DELETE", self._path(name), token=token)


__all__ = ["AuthorityClient", "ScopesAPI", "validate_issuer_url"]
