"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from civichub.core.errors import ForbiddenError, Unauthenticated
from civichub.core.security import decode_access_token
from civichub.db.session import get_db
from civichub.models.user import User
from civichub.schemas.user import Actor
from civichub.services.auth_service import get_user_by_email
from civichub.services.sentiment_service import Classifier, classify_sentiment

security = HTTPBearer(auto_error=False)


def get_current_user(
    db: Annotated[Session, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Require an authenticated, active user."""
    if not credentials:
        raise Unauthenticated()
    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise Unauthenticated("Invalid or expired token")
    # sub is the user's email
    user = get_user_by_email(db, payload["sub"])
    if not user:
        raise Unauthenticated("User not found")
    if not user.is_active:
        raise Unauthenticated("User is inactive")
    return user


def get_actor(current_user: Annotated[User, Depends(get_current_user)]) -> Actor:
    """The acting-user context handed to services."""
    return Actor.model_validate(current_user)


def require_admin(actor: Annotated[Actor, Depends(get_actor)]) -> Actor:
    if not actor.is_admin:
        raise ForbiddenError("Administrator access required")
    return actor


def get_classifier() -> Classifier:
    """Sentiment classifier used for new reports; overridden in tests."""
    return classify_sentiment
