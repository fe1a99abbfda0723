"""
Stores: admin creation and listings for admins, users and store owners.
"""
import logging

from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from app.errors import Conflict, NotFound, ValidationError
from app.models.rating import Rating
from app.models.store import Store
from app.models.user import User, ROLE_STORE_OWNER
from app.services import ratings, validation
from app.services.users import EMAIL_IN_USE_MSG, apply_order

logger = logging.getLogger(__name__)

STORE_SORT_FIELDS = ("name", "email", "address", "rating")


def _average_by_store(db: Session):
    return (
        db.query(Rating.store_id.label("store_id"), func.avg(Rating.rating).label("avg_rating"))
        .group_by(Rating.store_id)
        .subquery()
    )


def create_store(db: Session, name: str, email: str, address: str, owner_id: int) -> Store:
    """
    Insert a store owned by an existing store_owner.
    Raises ValidationError, NotFound (owner missing or not a store owner) or Conflict (email taken).
    """
    fields = validation.collect({
        "name": (validation.check_name, name),
        "email": (validation.check_email, email),
        "address": (validation.check_address, address),
    })
    owner = db.get(User, owner_id) if validation.is_id(owner_id) else None
    if owner is None or owner.role != ROLE_STORE_OWNER:
        raise NotFound("Store owner not found")
    if db.query(Store.id).filter(Store.email == fields["email"]).first():
        raise Conflict(EMAIL_IN_USE_MSG)
    store = Store(name=fields["name"], email=fields["email"], address=fields["address"], owner_id=owner.id)
    db.add(store)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Create store IntegrityError: %s", e.orig)
        raise Conflict(EMAIL_IN_USE_MSG) from e
    db.refresh(store)
    logger.info("Created store id=%s owner=%s", store.id, store.owner_id)
    return store


def list_admin_stores(
    db: Session,
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    sort: str = "name",
    order: str = "asc",
) -> list[dict]:
    if sort not in STORE_SORT_FIELDS:
        raise ValidationError(f"Invalid sort field. Must be one of: {', '.join(STORE_SORT_FIELDS)}")
    avg = _average_by_store(db)
    rating = func.coalesce(avg.c.avg_rating, 0)
    q = db.query(Store, rating.label("rating")).outerjoin(avg, avg.c.store_id == Store.id)
    if name:
        q = q.filter(Store.name.icontains(name, autoescape=True))
    if email:
        q = q.filter(Store.email.icontains(email, autoescape=True))
    if address:
        q = q.filter(Store.address.icontains(address, autoescape=True))
    column = rating if sort == "rating" else getattr(Store, sort)
    q = apply_order(q, column, order, Store.id)
    return [
        {
            "id": s.id,
            "name": s.name,
            "email": s.email,
            "address": s.address,
            "owner_id": s.owner_id,
            "rating": float(r),
        }
        for s, r in q.all()
    ]


def list_stores_for_user(db: Session, user_id: int, search: str | None = None) -> list[dict]:
    """Every store with its average and the caller's own rating (None if not rated)."""
    avg = _average_by_store(db)
    mine = aliased(Rating)
    q = (
        db.query(Store, func.coalesce(avg.c.avg_rating, 0), mine.rating)
        .outerjoin(avg, avg.c.store_id == Store.id)
        .outerjoin(mine, and_(mine.store_id == Store.id, mine.user_id == user_id))
    )
    if search:
        q = q.filter(
            Store.name.icontains(search, autoescape=True)
            | Store.address.icontains(search, autoescape=True)
        )
    q = q.order_by(Store.name.asc(), Store.id.asc())
    return [
        {
            "id": s.id,
            "name": s.name,
            "address": s.address,
            "average_rating": float(a),
            "user_rating": own,
        }
        for s, a, own in q.all()
    ]


def get_owner_store(db: Session, owner_id: int) -> dict:
    """The owner's first store (lowest id) with its average and rating count."""
    store = db.query(Store).filter(Store.owner_id == owner_id).order_by(Store.id.asc()).first()
    if store is None:
        raise NotFound("Store not found")
    return {
        "id": store.id,
        "name": store.name,
        "address": store.address,
        "average_rating": ratings.average_rating(db, store.id),
        "total_ratings": ratings.rating_count(db, store.id),
    }
