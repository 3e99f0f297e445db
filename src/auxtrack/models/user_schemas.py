"""Pydantic schemas for User API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auxtrack.core.security import check_password_policy
from auxtrack.core.validators import (
    DEPARTMENT_MAX_LENGTH,
    sanitize_text,
    validate_email,
    validate_full_name,
)
from auxtrack.models.user import UserRole


class UserCreate(BaseModel):
    """Schema for creating a new employee account."""

    email: str = Field(..., min_length=5, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=200)
    department: str | None = Field(None)
    role: UserRole = Field(UserRole.EMPLOYEE, description="admin, sub-admin or employee")

    @field_validator("email")
    @classmethod
    def validate_and_lowercase_email(cls, v: str) -> str:
        return validate_email(v)

    @field_validator("full_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_full_name(v)

    @field_validator("department")
    @classmethod
    def validate_department(cls, v: str | None) -> str | None:
        return sanitize_text(v, DEPARTMENT_MAX_LENGTH, "Department")

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return check_password_policy(v)


class UserResponse(BaseModel):
    """Public user fields."""

    id: UUID
    email: str
    full_name: str
    department: str | None = None
    role: str
    is_active: bool
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    """Partial update of an account. Omitted fields are left unchanged."""

    full_name: str | None = Field(None, min_length=1, max_length=200)
    department: str | None = Field(None, description="null clears the department")
    is_active: bool | None = Field(None, description="false deactivates the account")

    @field_validator("full_name")
    @classmethod
    def validate_name(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("Full name cannot be null")
        return validate_full_name(v)

    @field_validator("department")
    @classmethod
    def validate_department(cls, v: str | None) -> str | None:
        return sanitize_text(v, DEPARTMENT_MAX_LENGTH, "Department")

    @field_validator("is_active")
    @classmethod
    def validate_is_active(cls, v: bool | None) -> bool:
        if v is None:
            raise ValueError("is_active cannot be null")
        return v
