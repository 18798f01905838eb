from __future__ import annotations

from enum import Enum
from typing import Optional

from notes_sync.api.client import APIClient, APIError, TokenSource
from notes_sync.errors import AuthError, ValidationError
from notes_sync.logging import get_logger
from notes_sync.session import MemorySessionStore

log = get_logger(__name__)

SIGNUP_PATH = "/api/signup"
SIGNIN_PATH = "/api/signin"

# The service answers 500 when the account already exists; no other
# status tells the two apart, so every 500 on signup reads as a duplicate.
DUPLICATE_ACCOUNT_STATUS = 500


class AuthState(str, Enum):
    SIGNED_OUT = "signed-out"
    SIGNED_IN = "signed-in"


def auth_state(session: TokenSource) -> AuthState:
    """The only transition function: state follows token presence."""
    return AuthState.SIGNED_IN if session.get() else AuthState.SIGNED_OUT


def _credentials(username: str, password: str) -> dict:
    username = (username or "").strip()
    if not username or not (password or "").strip():
        raise ValidationError("Username and password are required")
    return {"username": username, "password": password}


class AuthFlow:
    """Signup, signin and signout against the service, writing the session."""

    def __init__(self, api: APIClient, session: MemorySessionStore) -> None:
        self.api = api
        self.session = session

    @property
    def state(self) -> AuthState:
        return auth_state(self.session)

    async def _post(self, path: str, body: dict, action: str):
        try:
            return await self.api.post(path, json_data=body, authenticated=False)
        except APIError as e:
            raise AuthError(f"{action} failed: {e}")

    async def signin(self, username: str, password: str) -> AuthState:
        body = _credentials(username, password)
        response = await self._post(SIGNIN_PATH, body, "Sign in")
        if not response.ok:
            log.warning(f"Sign in for {body['username']} returned {response.status_code}")
            raise AuthError(f"Sign in failed (HTTP {response.status_code})", status=response.status_code)
        data = response.json
        token: Optional[str] = data.get("session_token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthError("Sign in failed: no session token in response", status=response.status_code)
        self.session.set(token)
        log.info(f"Signed in as {body['username']}")
        return self.state

    async def signup(self, username: str, password: str) -> AuthState:
        """Create the account, then sign in with the same credentials once."""
        body = _credentials(username, password)
        response = await self._post(SIGNUP_PATH, body, "Sign up")
        if response.status_code == DUPLICATE_ACCOUNT_STATUS:
            raise AuthError(
                "Sign up failed: the account probably exists already, try signing in instead",
                status=response.status_code,
                likely_duplicate=True,
            )
        if not response.ok:
            raise AuthError(f"Sign up failed (HTTP {response.status_code})", status=response.status_code)
        log.info(f"Signed up {body['username']}")
        return await self.signin(username, password)

    def signout(self) -> AuthState:
        self.session.clear()
        return self.state
