"""
Admin dashboard schemas: stats, user/store listings, add user, add store.
"""
from pydantic import EmailStr, field_validator

from app.schemas.base import CamelModel
from app.services import validation


class StatsResponse(CamelModel):
    total_users: int
    total_stores: int
    total_ratings: int


class AdminUserItem(CamelModel):
    id: int
    name: str
    email: str
    address: str
    role: str
    # Mean rating across the stores a store_owner owns; None for other roles or no ratings
    rating: float | None = None


class AdminStoreItem(CamelModel):
    id: int
    name: str
    email: str
    address: str
    owner_id: int
    rating: float


class StoreOwnerItem(CamelModel):
    id: int
    name: str
    email: str


class CreateUserRequest(CamelModel):
    name: str
    email: EmailStr
    address: str
    password: str
    role: str

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


class CreateUserResponse(CamelModel):
    message: str = "User added successfully"
    user_id: int


class CreateStoreRequest(CamelModel):
    name: str
    email: EmailStr
    address: str
    owner_id: int

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

    @field_validator("owner_id", mode="before")
    @classmethod
    def owner_id_in_range(cls, v):
        return validation.check_id(v, "Owner ID")


class CreateStoreResponse(CamelModel):
    message: str = "Store added successfully"
    store_id: int
