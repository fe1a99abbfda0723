"""
Auth request/response schemas.
"""
from pydantic import EmailStr, field_validator

from app.models.user import ROLE_USER
from app.schemas.base import CamelModel
from app.services import validation


class RegisterRequest(CamelModel):
    name: str
    email: EmailStr
    address: str
    password: str
    role: str = ROLE_USER

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        return validation.check_name(v)

    @field_validator("email", mode="after")
    @classmethod
    def email_lower(cls, v: str) -> str:
        return validation.normalize_email(v)

    @field_validator("address")
    @classmethod
    def address_length(cls, v: str) -> str:
        return validation.check_address(v)

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        return validation.check_password(v)

    @field_validator("role")
    @classmethod
    def known_role(cls, v: str) -> str:
        return validation.check_role(v)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str

    @field_validator("email", "password", mode="before")
    @classmethod
    def not_blank(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Email and password are required")
        return v

    @field_validator("email", mode="after")
    @classmethod
    def email_lower(cls, v: str) -> str:
        return validation.normalize_email(v)


class UserPublic(CamelModel):
    """Public projection of a user; never carries the password hash."""
    id: int
    name: str
    email: str
    role: str


class RegisterResponse(CamelModel):
    message: str = "User registered successfully"
    user_id: int


class LoginResponse(CamelModel):
    message: str = "Login successful"
    token: str
    user: UserPublic
