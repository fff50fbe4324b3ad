"""Session lifecycle: login, signup, logout.

These are the only writers of the CSRF token. The auth endpoints are exempt
from the CSRF header since the token is issued by them.
"""

from typing import Any

import httpx
import structlog

from fintrack.core.credentials import CredentialContext
from fintrack.core.exceptions import AuthenticationError, RequestFailedError
from fintrack.core.http import ApiClient
from fintrack.schemas.user import SessionUser, UserCredentials

logger = structlog.get_logger()


class AuthService:
    path = "/api/auth"

    def __init__(self, api: ApiClient, credentials: CredentialContext) -> None:
        self.api = api
        self.credentials = credentials
        self.user: SessionUser | None = None

    async def _authenticate(
        self, action: str, email: str, password: str, fallback: str
    ) -> dict[str, Any]:
        data = UserCredentials(email=email, password=password)
        try:
            response = await self.api.request(
                "POST",
                f"{self.path}/{action}",
                json=data.model_dump(),
                raise_on_unauthorized=False,
            )
        except httpx.HTTPError as exc:
            raise RequestFailedError(action) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if not response.is_success:
            logger.warning(f"{action}_rejected", status=response.status_code)
            raise AuthenticationError(body.get("error") or fallback, response.status_code)

        token = body.get("csrfToken")
        if token:
            self.credentials.set(token)
        return body

    async def login(self, email: str, password: str) -> SessionUser:
        """Open a session; the CSRF token from the response is stored."""
        await self._authenticate("login", email, password, "Login failed")
        self.user = SessionUser(email=email)
        logger.info("login_succeeded", csrf_token_issued=self.credentials.is_set)
        return self.user

    async def signup(self, email: str, password: str) -> None:
        """Create an account. The caller logs in afterwards."""
        await self._authenticate("signup", email, password, "Signup failed")
        logger.info("signup_succeeded")

    async def logout(self) -> None:
        """Close the session. Local state is cleared even if the call fails."""
        try:
            await self.api.request("POST", f"{self.path}/logout", raise_on_unauthorized=False)
        except httpx.HTTPError as exc:
            logger.warning("logout_request_failed", error=str(exc))
        self.user = None
        self.credentials.clear()
        logger.info("logout")

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None
