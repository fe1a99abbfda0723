"""
Store listing schemas for users and store owners.
"""
from datetime import datetime

from app.schemas.base import CamelModel


class StoreListItem(CamelModel):
    id: int
    name: str
    address: str
    average_rating: float
    # The caller's own rating, None when they have not rated this store
    user_rating: int | None = None


class OwnerStoreResponse(CamelModel):
    id: int
    name: str
    address: str
    average_rating: float
    total_ratings: int


class RaterItem(CamelModel):
    id: int
    name: str
    email: str
    rating: int
    rated_at: datetime
    updated_at: datetime
