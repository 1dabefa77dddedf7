"""
Authentication routes for user registration, login, and profile lookup.
"""

from fastapi import APIRouter, Depends, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address
from typing import Any, Dict
from loguru import logger

from taskhub.config import settings
from taskhub.exceptions import APIError, Conflict, DuplicateEmailError, InternalError, Unauthenticated
from taskhub.middleware.auth_middleware import get_current_user
from taskhub.middleware.validation import validate_body
from taskhub.models.user import UserCreate, UserLogin, UserResponse
from taskhub.services.database import UserDB
from taskhub.utils.auth import get_password_hash, verify_password, create_access_token

router = APIRouter(prefix="/api/auth", tags=["authentication"])

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

AUTH_RATE_LIMIT = f"{settings.AUTH_RATE_LIMIT_PER_MINUTE}/minute"


def issue_token(user: Dict[str, Any]) -> str:
    return create_access_token(data={"sub": str(user["_id"]), "email": user["email"]})


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit(AUTH_RATE_LIMIT)
async def register(
    request: Request,
    user: UserCreate = Depends(validate_body(UserCreate))
):
    """
    Register a new user account.

    Args:
        request: FastAPI request (for rate limiting)
        user: User registration data

    Returns:
        The created user and a JWT access token

    Raises:
        Conflict: If the email is already registered
    """
    try:
        # Unique index on email is authoritative, see create_user below
        if await UserDB.get_user_by_email(user.email):
            raise Conflict("User already exists with this email")

        hashed_password = await get_password_hash(user.password)

        try:
            created_user = await UserDB.create_user(
                name=user.name,
                email=user.email,
                hashed_password=hashed_password
            )
        except DuplicateEmailError:
            raise Conflict("User already exists with this email")

        logger.info(f"New user registered: {user.email}")

        return {
            "success": True,
            "message": "User registered successfully",
            "data": {
                "user": UserResponse.from_document(created_user),
                "token": issue_token(created_user)
            }
        }

    except APIError:
        raise
    except Exception as e:
        logger.error(f"Registration failed: {e}")
        raise InternalError("Error registering user", detail=str(e))


@router.post("/login")
@limiter.limit(AUTH_RATE_LIMIT)
async def login(
    request: Request,
    credentials: UserLogin = Depends(validate_body(UserLogin))
):
    """
    Authenticate user and return JWT token.

    Args:
        request: FastAPI request (for rate limiting)
        credentials: User login credentials

    Returns:
        The user and a JWT access token

    Raises:
        Unauthenticated: If credentials are invalid
    """
    try:
        db_user = await UserDB.get_user_by_email(credentials.email)

        if not db_user or not await verify_password(credentials.password, db_user["hashed_password"]):
            raise Unauthenticated("Invalid email or password")

        logger.info(f"User logged in: {credentials.email}")

        return {
            "success": True,
            "message": "Login successful",
            "data": {
                "user": UserResponse.from_document(db_user),
                "token": issue_token(db_user)
            }
        }

    except APIError:
        raise
    except Exception as e:
        logger.error(f"Login failed: {e}")
        raise InternalError("Error logging in", detail=str(e))


@router.get("/me")
async def get_current_user_info(current_user: Dict[str, Any] = Depends(get_current_user)):
    """Get the authenticated user's profile."""
    return {
        "success": True,
        "data": UserResponse.from_document(current_user)
    }
