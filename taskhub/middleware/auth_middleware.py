"""
Authentication middleware for protecting routes with JWT verification.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Any, Dict, Optional
from loguru import logger

from taskhub.exceptions import InvalidTokenError, Unauthenticated
from taskhub.services.database import UserDB
from taskhub.utils.auth import verify_token

security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Dict[str, Any]:
    """
    Dependency to resolve the bearer token into a user document.

    Args:
        request: Incoming request; the user is stored on request.state.user
        credentials: HTTP Bearer token credentials, if any

    Returns:
        The authenticated user's database document

    Raises:
        Unauthenticated: If the token is missing, invalid, or its user is gone
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Access denied. No token provided.")

    try:
        token_data = verify_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise Unauthenticated("Invalid token.")

    user = await UserDB.get_user_by_id(token_data.user_id)
    if not user:
        raise Unauthenticated("Invalid token. User not found.")

    request.state.user = user
    return user
