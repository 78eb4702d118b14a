"""Identity provider clients resolving bearer tokens to user ids"""

import logging
import httpx
import jwt
from transfer_gateway.domain.exceptions import Unauthorized
from transfer_gateway.config import Settings


class IdentityClient:
    """Client for the external auth provider's user endpoint"""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def resolve_user(self, token: str) -> str:
        """
        Look up the user that owns an access token.

        Raises:
            Unauthorized: On rejected tokens, malformed responses or provider outages
        """
        headers = {"Authorization": f"Bearer {token}"}
        if self.api_key:
            headers["apikey"] = self.api_key

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/auth/v1/user", headers=headers)
                response.raise_for_status()
                user_id = response.json().get("id")

            except httpx.TimeoutException as e:
                logging.error(f"Identity provider timeout after {self.timeout}s")
                raise Unauthorized() from e
            except httpx.HTTPStatusError as e:
                if e.response.status_code >= 500:
                    logging.error(f"Identity provider error: {e.response.status_code}")
                raise Unauthorized() from e
            except httpx.RequestError as e:
                logging.error(f"Identity provider unreachable: {e}")
                raise Unauthorized() from e
            except (ValueError, AttributeError) as e:
                logging.error(f"Invalid user payload from identity provider: {e}")
                raise Unauthorized() from e

        if not user_id:
            raise Unauthorized()
        return str(user_id)


class JWTIdentityResolver:
    """Verifies HS256 access tokens locally with the provider's signing secret"""

    def __init__(self, secret: str, audience: str | None = None):
        self.secret = secret
        self.audience = audience

    async def resolve_user(self, token: str) -> str:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=["HS256"],
                audience=self.audience,
                options={"require": ["sub", "exp"]},
            )
        except jwt.InvalidTokenError as e:
            logging.warning(f"Rejected access token: {e}")
            raise Unauthorized() from e
        return str(claims["sub"])


def build_identity_resolver(settings: Settings) -> IdentityClient | JWTIdentityResolver:
    """Verify locally when a signing secret is configured, otherwise ask the provider"""
    if settings.auth_jwt_secret:
        return JWTIdentityResolver(settings.auth_jwt_secret, settings.auth_jwt_audience or None)
    return IdentityClient(
        base_url=settings.auth_api_base,
        api_key=settings.auth_api_key,
        timeout=settings.http_timeout_seconds,
    )
