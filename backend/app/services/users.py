"""
User accounts: registration, admin add-user, login, and the admin user listings.
"""
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import Conflict, Forbidden, Unauthenticated, ValidationError
from app.models.rating import Rating
from app.models.store import Store
from app.models.user import User, ROLE_ADMIN, ROLE_STORE_OWNER, ROLE_USER
from app.services import validation
from app.services.auth import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_LOGIN_MSG = "Invalid email or password"
EMAIL_IN_USE_MSG = "Email already in use"

USER_SORT_FIELDS = ("name", "email", "address", "role")


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def create_user(db: Session, name: str, email: str, address: str, password: str, role: str) -> User:
    """Validate, hash and insert. Raises ValidationError or Conflict (email taken)."""
    fields = validation.collect({
        "name": (validation.check_name, name),
        "email": (validation.check_email, email),
        "address": (validation.check_address, address),
        "password": (validation.check_password, password),
        "role": (validation.check_role, role),
    })
    if db.query(User.id).filter(User.email == fields["email"]).first():
        raise Conflict(EMAIL_IN_USE_MSG)
    user = User(
        name=fields["name"],
        email=fields["email"],
        address=fields["address"],
        password_hash=hash_password(fields["password"]),
        role=fields["role"],
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Concurrent insert with the same email won the race
        db.rollback()
        logger.warning("Create user IntegrityError: %s", e.orig)
        raise Conflict(EMAIL_IN_USE_MSG) from e
    db.refresh(user)
    logger.info("Created user id=%s role=%s", user.id, user.role)
    return user


def register(db: Session, name: str, email: str, address: str, password: str, role: str = ROLE_USER) -> User:
    """
    Self-registration. Role defaults to user; store_owner may be requested.
    Requesting admin is refused unless ALLOW_ADMIN_SELF_REGISTRATION is on.
    """
    if role == ROLE_ADMIN and not settings.allow_admin_self_registration:
        logger.info("Refused self-registration with role=admin for %s", email)
        raise Forbidden("Admin accounts can only be created by an administrator")
    return create_user(db, name, email, address, password, role)


def login(db: Session, email: str, password: str) -> tuple[str, User]:
    """Return (token, user). Unknown email and wrong password fail identically."""
    if not email or not password:
        raise ValidationError("Email and password are required")
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user or not verify_password(password, user.password_hash):
        raise Unauthenticated(INVALID_LOGIN_MSG)
    return create_access_token(user.id, user.role), user


def counts(db: Session) -> dict:
    return {
        "total_users": db.query(func.count(User.id)).scalar() or 0,
        "total_stores": db.query(func.count(Store.id)).scalar() or 0,
        "total_ratings": db.query(func.count(Rating.id)).scalar() or 0,
    }


def apply_order(query, column, order: str, tiebreak):
    if order == "desc":
        return query.order_by(column.desc(), tiebreak.desc())
    return query.order_by(column.asc(), tiebreak.asc())


def list_users(
    db: Session,
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    role: str | None = None,
    sort: str = "name",
    order: str = "asc",
) -> list[dict]:
    """
    All users with a derived rating: for store owners, the mean of every rating on the stores
    they own (None if there are none); None for other roles.
    """
    if sort not in USER_SORT_FIELDS:
        raise ValidationError(f"Invalid sort field. Must be one of: {', '.join(USER_SORT_FIELDS)}")
    owner_avg = (
        db.query(Store.owner_id.label("owner_id"), func.avg(Rating.rating).label("avg_rating"))
        .join(Rating, Rating.store_id == Store.id)
        .group_by(Store.owner_id)
        .subquery()
    )
    q = db.query(User, owner_avg.c.avg_rating).outerjoin(owner_avg, owner_avg.c.owner_id == User.id)
    if name:
        q = q.filter(User.name.icontains(name, autoescape=True))
    if email:
        q = q.filter(User.email.icontains(email, autoescape=True))
    if address:
        q = q.filter(User.address.icontains(address, autoescape=True))
    if role:
        q = q.filter(User.role == role)
    q = apply_order(q, getattr(User, sort), order, User.id)
    return [
        {
            "id": u.id,
            "name": u.name,
            "email": u.email,
            "address": u.address,
            "role": u.role,
            "rating": float(avg) if avg is not None and u.role == ROLE_STORE_OWNER else None,
        }
        for u, avg in q.all()
    ]


def list_store_owners(db: Session) -> list[User]:
    return (
        db.query(User)
        .filter(User.role == ROLE_STORE_OWNER)
        .order_by(User.name.asc(), User.id.asc())
        .all()
    )
