"""Auth endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from civichub.core.deps import get_current_user
from civichub.core.errors import Unauthenticated
from civichub.core.security import create_access_token
from civichub.db.session import get_db
from civichub.models.user import User
from civichub.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserMe
from civichub.services.auth_service import authenticate_user, create_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserMe)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Register a citizen (or an admin listed in configuration)."""
    return create_user(db, data)


@router.post("/login", response_model=TokenResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    user = authenticate_user(db, data.email, data.password)
    if not user:
        raise Unauthenticated("Invalid email or password")
    return TokenResponse(access_token=create_access_token(user.email))


@router.get("/me", response_model=UserMe)
def me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user."""
    return current_user
