"""
SQLAlchemy models. Import here so the app and init_db can use them.
"""
from app.models.user import User, ROLES
from app.models.store import Store
from app.models.rating import Rating

__all__ = ["User", "ROLES", "Store", "Rating"]
