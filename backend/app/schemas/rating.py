"""
Rating submission schemas.
"""
from datetime import datetime
from typing import Literal

from pydantic import field_validator

from app.schemas.base import CamelModel
from app.services import validation


class SubmitRatingRequest(CamelModel):
    store_id: int
    rating: int

    @field_validator("store_id", mode="before")
    @classmethod
    def store_id_is_int(cls, v):
        return validation.check_id(v, "Store ID")

    @field_validator("rating", mode="before")
    @classmethod
    def rating_in_range(cls, v):
        return validation.check_rating(v)


class RatingResponse(CamelModel):
    store_id: int
    rating: int
    created_at: datetime
    updated_at: datetime


class SubmitRatingResponse(CamelModel):
    message: str
    status: Literal["created", "updated"]
    rating: RatingResponse
