"""
Auth Service

Registration, login, bearer-token authentication and profile management.

Passwords are hashed here, explicitly, with
``event_locator.core.security.get_password_hash`` before the user row is
written. Tokens are HS256 JWTs whose "sub" claim is the user id.

Usage:
------
    service = AuthService(db)

    user, token = await service.register(UserRegister(...))
    user, token = await service.login("a@x.com", "secret1")
    user = await service.authenticate(token)
"""

from typing import Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from event_locator.core.exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    NotFound,
    ServerError,
    Unauthorized,
)
from event_locator.core.logging import get_logger
from event_locator.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from event_locator.models.user import User
from event_locator.schemas.auth import ProfileUpdate, UserRegister
from event_locator.services.category_service import CategoryService

logger = get_logger(__name__)


def issue_token(user: User) -> str:
    """Sign a bearer token for ``user`` (expiry from settings, one day by default)."""
    return create_access_token({"sub": str(user.id)})


class AuthService:
    """
    Service for user accounts and credentials.

    All failures are raised as domain exceptions:
    - DuplicateEmail: registration with an email already in use
    - InvalidCredentials: unknown email, or password mismatch
    - Unauthorized: bad or expired token, or token for a vanished user
    - NotFound: profile lookup for an unknown user id
    - ServerError: storage failure (rolled back, cause logged)
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ========================================
    # Lookups
    # ========================================

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_profile(self, user_id: int) -> User:
        """
        Load a user with their preferred categories.

        Raises:
            NotFound: No user with this id
        """
        user = await self.db.get(User, user_id, populate_existing=True)
        if user is None:
            raise NotFound("User not found", code="user_not_found")
        return user

    # ========================================
    # Registration & Login
    # ========================================

    async def register(self, data: UserRegister) -> Tuple[User, str]:
        """
        Create an account and issue a token.

        The email is checked up front; the unique constraint on users.email
        catches concurrent registrations that slip past the check.

        Returns:
            (user, token)
        """
        email = data.email.lower()

        if await self.get_user_by_email(email) is not None:
            logger.warning("registration_rejected_duplicate_email", email=email)
            raise DuplicateEmail()

        user = User(
            email=email,
            password_hash=get_password_hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            latitude=data.latitude,
            longitude=data.longitude,
            preferred_language=data.preferred_language,
            default_radius=data.default_radius,
            preferred_categories=[],
        )
        self.db.add(user)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("registration_rejected_duplicate_email", email=email)
            raise DuplicateEmail() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("registration_failed", email=email, error=str(e))
            raise ServerError() from e

        logger.info("user_registered", user_id=user.id)
        return user, issue_token(user)

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Verify credentials and issue a token.

        The same error is raised for an unknown email and a wrong password.
        """
        user = await self.get_user_by_email(email)

        if user is None or not verify_password(password, user.password_hash):
            logger.warning("login_failed", email=email.lower())
            raise InvalidCredentials()

        logger.info("login_successful", user_id=user.id)
        return user, issue_token(user)

    # ========================================
    # Token Authentication
    # ========================================

    async def authenticate(self, token: str) -> User:
        """
        Resolve the user a bearer token was issued to.

        Raises:
            Unauthorized: Token malformed, expired, badly signed, without a
                          usable subject, or the user no longer exists
        """
        invalid = Unauthorized("Token is not valid", code="token_invalid")

        payload = decode_access_token(token)
        if payload is None:
            raise invalid

        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            raise invalid

        user = await self.db.get(User, user_id)
        if user is None:
            logger.warning("token_for_unknown_user", user_id=user_id)
            raise invalid

        return user

    # ========================================
    # Profile & Password
    # ========================================

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        """
        Replace the user's password.

        Raises:
            InvalidCredentials: ``current_password`` does not match
        """
        if not verify_password(current_password, user.password_hash):
            logger.warning("password_change_rejected", user_id=user.id)
            raise InvalidCredentials("Current password is incorrect", code="incorrect_password")

        user.password_hash = get_password_hash(new_password)
        await self._commit(user.id, "password_change_failed")

        logger.info("password_changed", user_id=user.id)

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Partially update the profile.

        Fields not supplied (None) keep their stored values. Latitude and
        longitude arrive together (enforced by the schema), so the location is
        replaced in one write.
        """
        if data.first_name is not None:
            user.first_name = data.first_name
        if data.last_name is not None:
            user.last_name = data.last_name
        if data.latitude is not None and data.longitude is not None:
            user.latitude = data.latitude
            user.longitude = data.longitude
        if data.preferred_language is not None:
            user.preferred_language = data.preferred_language
        if data.default_radius is not None:
            user.default_radius = data.default_radius
        if data.preferred_category_ids is not None:
            user.preferred_categories = await CategoryService(self.db).get_many(
                data.preferred_category_ids
            )

        await self._commit(user.id, "profile_update_failed")

        logger.info("profile_updated", user_id=user.id)
        return user

    async def _commit(self, user_id: int, failure_event: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(failure_event, user_id=user_id, error=str(e))
            raise ServerError() from e
