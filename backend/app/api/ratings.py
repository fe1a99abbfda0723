"""
Ratings API: POST /ratings creates (201) or overwrites (200) the caller's rating for a store.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.database import get_db
from app.schemas.auth import UserPublic
from app.schemas.rating import SubmitRatingRequest, SubmitRatingResponse, RatingResponse
from app.services import ratings

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("", response_model=SubmitRatingResponse, responses={201: {"model": SubmitRatingResponse}})
def submit_rating(
    data: SubmitRatingRequest,
    response: Response,
    current_user: UserPublic = Depends(require_user),
    db: Session = Depends(get_db),
):
    outcome = ratings.submit_rating(db, current_user.id, data.store_id, data.rating)
    if outcome.status == ratings.CREATED:
        response.status_code = status.HTTP_201_CREATED
        message = "Rating submitted successfully"
    else:
        message = "Rating updated successfully"
    return SubmitRatingResponse(
        message=message,
        status=outcome.status,
        rating=RatingResponse(
            store_id=outcome.store_id,
            rating=outcome.rating,
            created_at=outcome.created_at,
            updated_at=outcome.updated_at,
        ),
    )
