"""Schemas for registration, login and the user profile."""
from datetime import date

from pydantic import BaseModel, EmailStr, Field

from app.models.enums import ExperienceLevel, InjuryArea, TrainingGoal


class UserRegister(BaseModel):
    """User registration request."""
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str


class UserLogin(BaseModel):
    """User login request."""
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    user_id: int


class RegisterResponse(TokenResponse):
    """Registration also hands out the one-time plain API token."""
    api_token: str


class ApiTokenResponse(BaseModel):
    api_token: str


class UserProfileResponse(BaseModel):
    id: int
    email: str
    name: str | None = None
    birthday: date | None = None
    height: float | None = None
    height_unit: str | None = None
    weight: float | None = None
    weight_unit: str | None = None
    background: str | None = None
    training_goal: str | None = None
    training_experience: str | None = None
    injury_caution_area: str | None = None


class UserProfileUpdate(BaseModel):
    """Partial profile update; only fields present in the body are written."""
    email: EmailStr | None = None
    name: str | None = Field(default=None, min_length=1, max_length=120)
    birthday: date | None = None
    height: float | None = Field(default=None, gt=0)
    height_unit: str | None = Field(default=None, max_length=10)
    weight: float | None = Field(default=None, gt=0)
    weight_unit: str | None = Field(default=None, max_length=10)
    background: str | None = None
    training_goal: TrainingGoal | None = None
    training_experience: ExperienceLevel | None = None
    injury_caution_area: InjuryArea | None = None