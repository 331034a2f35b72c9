"""
Authentication endpoints.

This module provides:
- Registration (``/auth/register``, with ``/auth/signup`` as an alias)
- Login (JSON email + password, returns a bearer token)
- Profile read/update for the current user
- Password change

Protected endpoints expect ``Authorization: Bearer <token>``.

References:
-----------
- FastAPI Security: https://fastapi.tiangolo.com/tutorial/security/
"""

from fastapi import APIRouter, status

from event_locator.core.auth import CurrentUser
from event_locator.core.i18n import RequestLanguage, translate
from event_locator.db.deps import DBSession
from event_locator.schemas.auth import (
    AuthResponse,
    PasswordChange,
    ProfileResponse,
    ProfileUpdate,
    UserLogin,
    UserRegister,
    UserResponse,
)
from event_locator.schemas.common import MessageResponse, ValidationErrorResponse
from event_locator.services.auth_service import AuthService

# Create router
router = APIRouter(prefix="/auth", tags=["authentication"])


# ================================
# Registration & Login
# ================================

@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ValidationErrorResponse}},
)
@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def register(data: UserRegister, db: DBSession, lng: RequestLanguage) -> AuthResponse:
    """
    Register a new account.

    Example request:
        POST /api/auth/register
        {
            "email": "a@x.com",
            "password": "secret1",
            "first_name": "Ada",
            "last_name": "Lovelace"
        }

    Returns:
        201 with the token and the public user projection

    Raises:
        400: Validation failed, or the email is already registered
    """
    user, token = await AuthService(db).register(data)

    return AuthResponse(
        message=translate("user_registered", lng),
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(data: UserLogin, db: DBSession, lng: RequestLanguage) -> AuthResponse:
    """
    Login with email and password.

    Response:
    ---------
    {
        "message": "Login successful",
        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
        "token_type": "bearer",
        "user": {...}
    }

    Raises:
        401: Unknown email or wrong password (same message for both)
    """
    user, token = await AuthService(db).login(data.email, data.password)

    return AuthResponse(
        message=translate("login_successful", lng),
        token=token,
        user=UserResponse.model_validate(user),
    )


# ================================
# Current User
# ================================

@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: CurrentUser, db: DBSession) -> UserResponse:
    """Get the current user's profile, including preferred categories."""
    user = await AuthService(db).get_profile(current_user.id)
    return UserResponse.model_validate(user)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: CurrentUser,
    db: DBSession,
    lng: RequestLanguage,
) -> ProfileResponse:
    """
    Update the current user's profile.

    Only supplied fields change. Latitude and longitude must be sent
    together.
    """
    user = await AuthService(db).update_profile(current_user, data)

    return ProfileResponse(
        message=translate("profile_updated", lng),
        user=UserResponse.model_validate(user),
    )


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    data: PasswordChange,
    current_user: CurrentUser,
    db: DBSession,
    lng: RequestLanguage,
) -> MessageResponse:
    """
    Change the current user's password.

    Raises:
        401: Current password is incorrect
    """
    await AuthService(db).change_password(
        current_user, data.current_password, data.new_password
    )
    return MessageResponse(message=translate("password_changed", lng))
