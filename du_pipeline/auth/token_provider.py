from abc import ABC, abstractmethod

import httpx

from du_pipeline.logging.logger import Log
from du_pipeline.remote.client import parse_json_object
from du_pipeline.remote.exceptions import RemoteError, SchemaError, TransportError


class BaseTokenProvider(ABC):
    """Contract for anything that can hand out a bearer token."""

    @abstractmethod
    def get_bearer_token(self) -> str:
        """Return a bearer token valid for the remote service.

        Raises:
            TransportError, RemoteError, SchemaError: on acquisition failure.
        """


class StaticTokenProvider(BaseTokenProvider):
    """Returns a token acquired elsewhere."""

    def __init__(self, token: str) -> None:
        self._token = token

    def get_bearer_token(self) -> str:
        return self._token


class ClientCredentialsTokenProvider(BaseTokenProvider):
    """OAuth2 client-credentials flow against the identity endpoint."""

    def __init__(
        self,
        *,
        auth_url: str,
        app_id: str,
        app_secret: str,
        scope: str,
        timeout_seconds: float = 30,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._auth_url = auth_url
        self._app_id = app_id
        self._app_secret = app_secret
        self._scope = scope
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout_seconds)

    def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_http:
            self._http.close()

    def get_bearer_token(self) -> str:
        form = {
            "grant_type": "client_credentials",
            "client_id": self._app_id,
            "client_secret": self._app_secret,
            "scope": self._scope,
        }
        try:
            response = self._http.post(self._auth_url, data=form)
        except httpx.TransportError as exc:
            raise TransportError(f"Token request to {self._auth_url} failed: {exc}") from exc

        if not response.is_success:
            raise RemoteError(response.status_code, response.text, url=self._auth_url)

        body = parse_json_object(response.text, source=self._auth_url)
        token = body.get("access_token")
        if not isinstance(token, str) or not token:
            raise SchemaError("Token response has no 'access_token'")
        Log.info("Bearer token acquired")
        return token
