"""
Admin API: dashboard counts, user and store listings (filter + sort), add user, add store.
Every route requires role admin.
"""
from typing import Literal

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.database import get_db
from app.schemas.admin import (
    StatsResponse,
    AdminUserItem,
    AdminStoreItem,
    StoreOwnerItem,
    CreateUserRequest,
    CreateUserResponse,
    CreateStoreRequest,
    CreateStoreResponse,
)
from app.schemas.auth import UserPublic
from app.services import stores, users

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=StatsResponse)
def stats(_: UserPublic = Depends(require_admin), db: Session = Depends(get_db)):
    return StatsResponse(**users.counts(db))


@router.get("/users", response_model=list[AdminUserItem])
def list_users(
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    role: str | None = None,
    sort: str = "name",
    order: Literal["asc", "desc"] = "asc",
    _: UserPublic = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All users with derived rating; optional case-insensitive filters."""
    return users.list_users(db, name=name, email=email, address=address, role=role, sort=sort, order=order)


@router.get("/stores", response_model=list[AdminStoreItem])
def list_stores(
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    sort: str = "name",
    order: Literal["asc", "desc"] = "asc",
    _: UserPublic = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All stores with average rating (0 when unrated)."""
    return stores.list_admin_stores(db, name=name, email=email, address=address, sort=sort, order=order)


@router.get("/store-owners", response_model=list[StoreOwnerItem])
def list_store_owners(_: UserPublic = Depends(require_admin), db: Session = Depends(get_db)):
    """Candidates for a new store's owner."""
    return users.list_store_owners(db)


@router.post("/users", response_model=CreateUserResponse, status_code=status.HTTP_201_CREATED)
def add_user(data: CreateUserRequest, _: UserPublic = Depends(require_admin), db: Session = Depends(get_db)):
    user = users.create_user(db, data.name, data.email, data.address, data.password, data.role)
    return CreateUserResponse(user_id=user.id)


@router.post("/stores", response_model=CreateStoreResponse, status_code=status.HTTP_201_CREATED)
def add_store(data: CreateStoreRequest, _: UserPublic = Depends(require_admin), db: Session = Depends(get_db)):
    store = stores.create_store(db, data.name, data.email, data.address, data.owner_id)
    return CreateStoreResponse(store_id=store.id)
