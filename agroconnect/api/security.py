"""Authentication dependencies shared by the buyer routers."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..auth import AuthClient, AuthUser
from ..errors import Unauthenticated

bearer_scheme = HTTPBearer(auto_error=False)

# Shared client (started on first use, closed on shutdown)
_auth_client: Optional[AuthClient] = None


def get_auth_client() -> AuthClient:
    """Dependency to get the auth provider client."""
    global _auth_client
    if _auth_client is None:
        _auth_client = AuthClient()
    return _auth_client


async def close_auth_client() -> None:
    global _auth_client
    if _auth_client is not None:
        await _auth_client.close()
        _auth_client = None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_client: AuthClient = Depends(get_auth_client),
) -> AuthUser:
    """Resolve the bearer token to a user or fail with 401."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    if not auth_client.is_started:
        await auth_client.start()

    user = await auth_client.get_current_user(credentials.credentials)
    if user is None:
        raise Unauthenticated()
    return user
