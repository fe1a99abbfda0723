"""
Stores API for any authenticated caller: every store with its average and the caller's own rating.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.database import get_db
from app.schemas.auth import UserPublic
from app.schemas.store import StoreListItem
from app.services import stores

router = APIRouter(prefix="/stores", tags=["stores"])


@router.get("", response_model=list[StoreListItem])
def list_stores(
    search: str | None = None,
    current_user: UserPublic = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Optional search matches store name or address."""
    return stores.list_stores_for_user(db, current_user.id, search=search)
