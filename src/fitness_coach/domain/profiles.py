"""User profile models."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

Gender = Literal["male", "female", "other", "prefer-not-to-say"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very-active"]


class UserProfile(BaseModel):
    """Profile attributes consumed by the diet plan generator."""

    user_id: str
    name: str | None = None
    age: int | None = None
    gender: str | None = None
    height: float | None = None
    weight: float | None = None
    activity_level: str | None = None
    medical_conditions: str | None = None
    dietary_preferences: str | None = None
    region: str | None = None


class ProfileUpdate(BaseModel):
    """Validated profile edit submitted by the user."""

    name: str = Field(min_length=2)
    age: int = Field(ge=16, le=120)
    gender: Gender
    height: float = Field(ge=50, le=250)
    weight: float = Field(ge=20, le=300)
    activity_level: ActivityLevel
    region: str = Field(min_length=1)
    medical_conditions: str | None = None
    dietary_preferences: str | None = None

    @field_validator("medical_conditions", "dietary_preferences")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()
