"""Bearer-token authentication for protected endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, HTTPException, Request, status

from around.domain.errors import InvalidTokenError
from around.domain.models import AuthenticatedUser

if TYPE_CHECKING:
    from around.containers import AppContainer


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> AuthenticatedUser:
    """Return the identity carried by a valid bearer token."""
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Required authorization token not found",
        )
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header format must be Bearer {token}",
        )
    container: AppContainer = request.app.state.container
    try:
        return container.token_service.verify_token(token.strip())
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)
        ) from exc
