"""
Auth routes: register (role defaults to user), login (JWT), GET /auth/me.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.auth import RegisterRequest, RegisterResponse, LoginRequest, LoginResponse, UserPublic
from app.services import users
from app.api.deps import get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new user; role defaults to user."""
    user = users.register(db, data.name, data.email, data.address, data.password, data.role)
    return RegisterResponse(user_id=user.id)


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Login with email/password; returns JWT and the public user."""
    token, user = users.login(db, data.email, data.password)
    logger.debug("Login ok for user %s", user.id)
    return LoginResponse(token=token, user=UserPublic.model_validate(user))


@router.get("/me", response_model=UserPublic)
def me(current_user: UserPublic = Depends(get_current_user)):
    """Return current user (id, name, email, role) as resolved from the database."""
    return current_user
