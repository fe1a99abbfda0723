"""
Rating ledger: one rating per (user, store), upserted atomically, averages computed on read.

submit_rating is a single INSERT ... ON CONFLICT (user_id, store_id) DO UPDATE ... RETURNING,
so concurrent submissions by the same user for the same store cannot both insert.
A returned row with created_at == updated_at was just inserted.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.errors import Internal, NotFound, ValidationError
from app.models.rating import Rating
from app.models.store import Store
from app.models.user import User
from app.services import validation

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"

# Dialects whose insert() supports on_conflict_do_update + returning
_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


@dataclass(frozen=True)
class RatingOutcome:
    status: str  # created | updated
    store_id: int
    rating: int
    created_at: datetime
    updated_at: datetime


_clock_lock = threading.Lock()
_last_stamp: datetime | None = None


def _utcnow() -> datetime:
    """UTC now, strictly increasing within the process."""
    global _last_stamp
    with _clock_lock:
        now = datetime.now(timezone.utc)
        if _last_stamp is not None and now <= _last_stamp:
            now = _last_stamp + timedelta(microseconds=1)
        _last_stamp = now
        return now


def submit_rating(db: Session, user_id: int, store_id: int, value) -> RatingOutcome:
    """
    Create or overwrite the caller's rating for a store.
    Raises ValidationError (value not an int in [1, 5]) or NotFound (no such store).
    """
    try:
        value = validation.check_rating(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    if not validation.is_id(store_id) or db.get(Store, store_id) is None:
        raise NotFound("Store not found")

    dialect = db.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        logger.error("Rating upsert is not supported on dialect %s", dialect)
        raise Internal("Internal server error")

    now = _utcnow()
    stmt = insert(Rating).values(
        user_id=user_id, store_id=store_id, rating=value, created_at=now, updated_at=now
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "store_id"],
        set_={"rating": stmt.excluded.rating, "updated_at": stmt.excluded.updated_at},
    ).returning(Rating.created_at, Rating.updated_at)
    try:
        row = db.execute(stmt).one()
        db.commit()
    except Exception:
        db.rollback()
        raise

    status = CREATED if row.created_at == row.updated_at else UPDATED
    logger.info("Rating %s: user=%s store=%s value=%s", status, user_id, store_id, value)
    return RatingOutcome(
        status=status,
        store_id=store_id,
        rating=value,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def average_rating(db: Session, store_id: int) -> float:
    """Mean of all ratings for the store; 0.0 when there are none. Never None."""
    avg = db.query(func.avg(Rating.rating)).filter(Rating.store_id == store_id).scalar()
    return float(avg) if avg is not None else 0.0


def rating_count(db: Session, store_id: int) -> int:
    return db.query(func.count(Rating.id)).filter(Rating.store_id == store_id).scalar() or 0


def raters_of(db: Session, store_id: int, requesting_owner_id: int) -> list[dict]:
    """
    Everyone who rated the store, newest first. Only the store's owner may ask;
    a missing store and someone else's store both raise NotFound so ownership is not revealed.
    """
    store = db.get(Store, store_id) if validation.is_id(store_id) else None
    if store is None or store.owner_id != requesting_owner_id:
        raise NotFound("Store not found or not owned by you")
    rows = (
        db.query(User.id, User.name, User.email, Rating.rating, Rating.created_at, Rating.updated_at)
        .join(Rating, Rating.user_id == User.id)
        .filter(Rating.store_id == store_id)
        .order_by(Rating.created_at.desc(), Rating.id.desc())
        .all()
    )
    return [
        {
            "id": r.id,
            "name": r.name,
            "email": r.email,
            "rating": r.rating,
            "rated_at": r.created_at,
            "updated_at": r.updated_at,
        }
        for r in rows
    ]
