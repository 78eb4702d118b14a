"""Dependency injection for FastAPI endpoints"""

from typing import Optional
from fastapi import Depends, Request
from transfer_gateway.config import Settings
from transfer_gateway.domain.authorizer import IdentityResolver
from transfer_gateway.domain.exceptions import Unauthorized
from transfer_gateway.domain.models import RequestMetadata


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_app_settings(request: Request) -> Settings:
    """Provide the settings the app was created with"""
    return request.app.state.settings


def get_identity_resolver(request: Request) -> IdentityResolver:
    """Provide the identity resolver the app was created with"""
    return request.app.state.identity_resolver


def get_bearer_token(request: Request) -> Optional[str]:
    """Extract the token from an `Authorization: Bearer <token>` header"""
    auth_header = request.headers.get("authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def get_request_metadata(request: Request) -> RequestMetadata:
    """Origin address and agent string recorded on transactions"""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        ip_address = forwarded_for.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else None

    return RequestMetadata(
        ip_address=ip_address or None,
        user_agent=request.headers.get("user-agent"),
    )


async def get_current_user(
    token: Optional[str] = Depends(get_bearer_token),
    identity_resolver: IdentityResolver = Depends(get_identity_resolver),
) -> str:
    """Resolve the caller's user id for read endpoints"""
    if not token:
        raise Unauthorized("Missing Authorization token")
    return await identity_resolver.resolve_user(token)
