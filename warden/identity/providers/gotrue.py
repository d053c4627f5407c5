"""GoTrue-compatible identity provider over HTTP."""

import os
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from warden.identity.models import Identity, Session
from warden.identity.provider import IdentityProvider, IdentityProviderError
from warden.observability.logging import get_logger

logger = get_logger(__name__)


class GoTrueIdentityProvider(IdentityProvider):
    """Identity provider using a GoTrue auth API.

    Talks to /auth/v1 on the managed backend with the project's public
    API key, and keeps the session it obtained on sign-in.
    """

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize GoTrue provider.

        Args:
            url: Base URL of the backend, without the /auth/v1 suffix
            api_key: Public API key (defaults to WARDEN_IDENTITY_API_KEY env var)
            timeout: Request timeout in seconds
            client: Preconfigured client, mainly for tests
        """
        self._api_key = api_key or os.environ.get("WARDEN_IDENTITY_API_KEY")
        if not self._api_key:
            raise ValueError("WARDEN_IDENTITY_API_KEY environment variable not set")

        self._base_url = url.rstrip("/") + "/auth/v1"
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._current: Session | None = None

    async def sign_up(
        self, email: str, password: str, attributes: dict[str, Any]
    ) -> Identity:
        """Create an identity. Does not sign it in."""
        data = await self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "data": attributes},
        )
        # Auto-confirming backends wrap the user next to a session
        identity = self._parse_user(data.get("user", data))
        logger.info("identity_created", identity_id=identity.id)
        return identity

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        """Authenticate credentials and start a session."""
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        expires_in = data.get("expires_in")
        self._current = Session(
            identity=self._parse_user(data["user"]),
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_at=(
                datetime.now(UTC) + timedelta(seconds=expires_in) if expires_in else None
            ),
        )
        return self._current

    async def sign_out(self) -> None:
        """End the current session, if any.

        The local session is dropped even when the server call fails.
        """
        session, self._current = self._current, None
        if session is None:
            return
        try:
            await self._request("POST", "/logout", access_token=session.access_token)
        except IdentityProviderError as e:
            logger.warning("gotrue_logout_failed", status_code=e.status_code, error=e.message)

    async def get_session(self) -> Session | None:
        """Return the current session after checking it with the server."""
        session = self._current
        if session is None:
            return None
        try:
            data = await self._request("GET", "/user", access_token=session.access_token)
        except IdentityProviderError as e:
            if e.status_code in (401, 403):
                self._current = None
                return None
            raise

        self._current = session.model_copy(update={"identity": self._parse_user(data)})
        return self._current

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {access_token or self._api_key}",
        }
        try:
            response = await self._client.request(
                method,
                self._base_url + path,
                headers=headers,
                json=json,
                params=params,
            )
        except httpx.HTTPError as e:
            logger.error("gotrue_request_error", path=path, error=str(e))
            raise IdentityProviderError(f"Auth service unreachable: {e}") from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.debug("gotrue_request_rejected", path=path, status_code=response.status_code)
            raise IdentityProviderError(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"Auth service error ({response.status_code})"
        if not isinstance(body, dict):
            return f"Auth service error ({response.status_code})"
        for key in ("error_description", "msg", "message", "error"):
            if isinstance(body.get(key), str):
                return body[key]
        return f"Auth service error ({response.status_code})"

    @staticmethod
    def _parse_user(user: dict[str, Any]) -> Identity:
        return Identity(
            id=user["id"],
            email=user.get("email", ""),
            attributes=user.get("user_metadata") or {},
        )
