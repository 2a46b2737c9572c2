"""Bearer-token verification for protected routes."""

from __future__ import annotations

import logging

import jwt
from fastapi import Request

from cateringapi.config import Settings
from cateringapi.errors import UnauthorizedError

log = logging.getLogger(__name__)


def decode_token(token: str, settings: Settings) -> dict:
    """Verify a JWT and return its claims."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired") from None
    except jwt.InvalidTokenError as e:
        log.info(f"Rejected token: {e}")
        raise UnauthorizedError("Invalid or expired token") from None


def bearer_token(request: Request) -> str:
    authorization = request.headers.get("Authorization")
    if not authorization:
        raise UnauthorizedError("Authorization header missing")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Invalid authorization header format. Use 'Bearer <token>'")
    return token.strip()


async def require_auth(request: Request) -> dict:
    """Router dependency: reject the request unless it carries a valid token."""
    settings: Settings = request.app.state.settings
    claims = decode_token(bearer_token(request), settings)
    request.state.claims = claims
    return claims
