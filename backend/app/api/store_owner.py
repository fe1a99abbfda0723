"""
Store owner API: the owner's store summary and who rated it.
"""
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from app.api.deps import require_store_owner
from app.database import get_db
from app.schemas.auth import UserPublic
from app.schemas.store import OwnerStoreResponse, RaterItem
from app.services import ratings, stores, validation

router = APIRouter(prefix="/store-owner", tags=["store-owner"])


@router.get("/store", response_model=OwnerStoreResponse)
def my_store(current_user: UserPublic = Depends(require_store_owner), db: Session = Depends(get_db)):
    """First store owned by the caller, with averageRating and totalRatings."""
    return stores.get_owner_store(db, current_user.id)


@router.get("/ratings/{store_id}", response_model=list[RaterItem])
def store_raters(
    store_id: int = Path(..., ge=1, le=validation.MAX_ID),
    current_user: UserPublic = Depends(require_store_owner),
    db: Session = Depends(get_db),
):
    """Raters of a store the caller owns, newest first."""
    return ratings.raters_of(db, store_id, current_user.id)
