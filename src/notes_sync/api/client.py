from __future__ import annotations

import json
from typing import Dict, Any, Optional, Protocol
from dataclasses import dataclass, field
from abc import ABC, abstractmethod
import httpx
from urllib.parse import urljoin

from notes_sync.config import AuthTransport
from notes_sync.logging import get_logger

log = get_logger(__name__)


@dataclass
class APIResponse:
    """Response from an API call."""
    status_code: int
    text: str

    @property
    def json(self) -> Any:
        """Parse response as JSON."""
        try:
            return json.loads(self.text)
        except json.JSONDecodeError:
            return None

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300


class APIError(Exception):
    """Exception raised when a request never produced a response."""


class TokenSource(Protocol):
    def get(self) -> Optional[str]: ...


class AuthMethod(ABC):
    """Base class for attaching the session credential to a request."""

    @abstractmethod
    def apply(self, headers: Dict[str, str], body: Dict[str, Any]) -> None:
        """Apply authentication to request headers or JSON body."""
        pass


@dataclass
class BearerAuth(AuthMethod):
    """Session token sent as an ``Authorization: Bearer`` header."""
    session: TokenSource

    def apply(self, headers: Dict[str, str], body: Dict[str, Any]) -> None:
        token = self.session.get()
        if token:
            headers['Authorization'] = f'Bearer {token}'


@dataclass
class BodyTokenAuth(AuthMethod):
    """Session token sent as a field of the JSON body, on every method."""
    session: TokenSource
    field_name: str = 'session_token'

    def apply(self, headers: Dict[str, str], body: Dict[str, Any]) -> None:
        token = self.session.get()
        if token:
            body[self.field_name] = token


def auth_for(transport: AuthTransport, session: TokenSource) -> AuthMethod:
    if transport == AuthTransport.BODY:
        return BodyTokenAuth(session)
    return BearerAuth(session)


@dataclass
class APIClient:
    """Async HTTP client bound to one service base URL."""
    base_url: str = ""
    default_headers: Dict[str, str] = field(default_factory=dict)
    auth: Optional[AuthMethod] = None
    timeout: Optional[float] = None
    follow_redirects: bool = True
    transport: Optional[httpx.AsyncBaseTransport] = None

    def __post_init__(self):
        self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=self.follow_redirects,
                transport=self.transport,
            )
        return self._client

    def _prepare_url(self, url: str) -> str:
        """Prepare full URL from base URL and endpoint."""
        if url.startswith(('http://', 'https://')):
            return url
        return urljoin(self.base_url.rstrip('/') + '/', url.lstrip('/'))

    async def request(
        self,
        method: str,
        url: str,
        json_data: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
    ) -> APIResponse:
        """Send one request and return its APIResponse, whatever the status."""
        full_url = self._prepare_url(url)
        request_headers = self.default_headers.copy()
        body: Dict[str, Any] = dict(json_data) if json_data is not None else {}

        if authenticated and self.auth:
            self.auth.apply(request_headers, body)

        # a body is only sent when there is something in it
        request_body = None
        if json_data is not None or body:
            request_body = json.dumps(body)
            request_headers.setdefault('Content-Type', 'application/json')

        log.debug(f"{method.upper()} {full_url}")

        try:
            response = await self.client.request(
                method=method.upper(),
                url=full_url,
                headers=request_headers,
                content=request_body,
            )
        except httpx.RequestError as e:
            log.warning(f"{method.upper()} {full_url} failed: {e}")
            raise APIError(f"Request failed: {e}")

        return APIResponse(status_code=response.status_code, text=response.text)

    async def post(self, url: str, **kwargs) -> APIResponse:
        """Make POST request."""
        return await self.request('POST', url, **kwargs)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
