"""Client for the external authentication provider."""

from typing import Optional

import httpx
from pydantic import BaseModel

from .config import AuthConfig, auth_config
from .logging_config import get_logger

logger = get_logger(__name__)


class AuthUser(BaseModel):
    """The signed-in user as reported by the provider."""

    id: str
    email: Optional[str] = None
    phone: Optional[str] = None


class AuthClient:
    """Resolves bearer tokens to users via the provider's "get user" endpoint."""

    def __init__(self, config: Optional[AuthConfig] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or auth_config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self):
        """Initialize the HTTP client."""
        if not self.config.is_configured:
            raise ValueError(
                "Auth provider not configured. "
                "Set AUTH_API_URL and AUTH_API_KEY in .env file."
            )

        self._client = httpx.AsyncClient(
            timeout=self.config.timeout,
            headers={"apikey": self.config.api_key},
            transport=self._transport,
        )

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def is_started(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client not started. Use 'async with' or call start() first.")
        return self._client

    async def get_current_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        """
        Look up the user owning ``access_token``.

        Returns:
            The user, or None when the token is missing or rejected, the
            provider cannot be reached, or its reply is not a user
        """
        if not access_token:
            return None

        try:
            response = await self.client.get(
                self.config.user_endpoint,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logger.warning("Auth provider request failed: %s", e)
            return None

        if response.status_code != 200:
            logger.info("Auth provider rejected token with status %d", response.status_code)
            return None

        # JSONDecodeError and pydantic's ValidationError are both ValueErrors.
        try:
            return AuthUser.model_validate(response.json())
        except ValueError as e:
            logger.warning("Auth provider returned an unusable user payload: %s", e)
            return None
