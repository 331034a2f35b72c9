"""
Authentication schemas (Pydantic models for request/response).

These schemas define:
- Request formats (what client sends)
- Response formats (what server returns)
- Data validation rules
- OpenAPI documentation

The public user projection (``UserResponse``) never includes the password
hash.

References:
-----------
- Pydantic: https://docs.pydantic.dev/latest/
- FastAPI Request Body: https://fastapi.tiangolo.com/tutorial/body/
"""

from datetime import datetime
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from event_locator.core.config import settings
from event_locator.core.dates import ensure_utc
from event_locator.models.user import Language
from event_locator.schemas.category import CategoryResponse


def _check_location_pair(latitude: Optional[float], longitude: Optional[float]) -> None:
    if (latitude is None) != (longitude is None):
        raise ValueError("latitude and longitude must be provided together")


# ================================
# Registration / Login
# ================================

class UserRegister(BaseModel):
    """
    User registration request.

    Example request:
        POST /api/auth/register
        {
            "email": "a@x.com",
            "password": "secret1",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "latitude": 40.7,
            "longitude": -73.9,
            "preferred_language": "en"
        }

    Location is optional, but latitude and longitude go together.
    """
    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["a@x.com"]
    )
    password: str = Field(
        ...,
        min_length=settings.PASSWORD_MIN_LENGTH,
        max_length=100,
        description=f"Password (minimum {settings.PASSWORD_MIN_LENGTH} characters)",
        examples=["secret1"]
    )
    first_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        examples=["Ada"]
    )
    last_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        examples=["Lovelace"]
    )
    latitude: Optional[float] = Field(None, ge=-90, le=90, examples=[40.7])
    longitude: Optional[float] = Field(None, ge=-180, le=180, examples=[-73.9])
    preferred_language: Language = Field(
        default=Language.EN,
        description="Preferred language (en, es, fr)"
    )
    default_radius: float = Field(
        default=settings.DEFAULT_SEARCH_RADIUS_KM,
        gt=0,
        description="Default search radius in kilometers"
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def check_location(self) -> "UserRegister":
        _check_location_pair(self.latitude, self.longitude)
        return self


class UserLogin(BaseModel):
    """
    User login request.

    Example request:
        POST /api/auth/login
        {"email": "a@x.com", "password": "secret1"}
    """
    email: EmailStr = Field(..., examples=["a@x.com"])
    password: str = Field(..., min_length=1, examples=["secret1"])

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


# ================================
# Profile
# ================================

class ProfileUpdate(BaseModel):
    """
    Partial profile update. Fields left out keep their stored values.

    Supplying latitude and longitude replaces the stored location in one
    write. ``preferred_category_ids`` replaces the preference set; unknown
    ids are skipped.
    """
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    preferred_language: Optional[Language] = None
    default_radius: Optional[float] = Field(None, gt=0)
    preferred_category_ids: Optional[list[int]] = Field(
        None,
        description="Replaces the preferred category set",
        examples=[[1, 3]]
    )

    @model_validator(mode="after")
    def check_location(self) -> "ProfileUpdate":
        _check_location_pair(self.latitude, self.longitude)
        return self


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(
        ...,
        min_length=settings.PASSWORD_MIN_LENGTH,
        max_length=100,
    )


# ================================
# Responses
# ================================

class UserResponse(BaseModel):
    """
    Public user projection.

    Example response:
        {
            "id": 1,
            "email": "a@x.com",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "location": {"type": "Point", "coordinates": [-73.9, 40.7]},
            "preferred_language": "en",
            "default_radius": 10.0,
            "preferred_categories": [{"id": 1, "name": "Music"}],
            "created_at": "2026-05-01T12:00:00Z",
            "updated_at": "2026-05-01T12:00:00Z"
        }
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    first_name: str
    last_name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location: Optional[dict] = None
    preferred_language: Language
    default_radius: float
    preferred_categories: list[CategoryResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class AuthResponse(BaseModel):
    """
    Returned by register and login.

    Client should send the token in future requests:
        Authorization: Bearer <token>
    """
    message: str
    token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileResponse(BaseModel):
    message: str
    user: UserResponse
