"""
Browser-session identity.

The signed session cookie (Starlette SessionMiddleware) carries
{"user": {"email": ..., "name": ...}} once the OAuth callback has called
record_sign_in(). Provider wiring lives outside this package.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from sqlmodel import Session

from chronos.models.user import User
from chronos.store.users import ensure_user

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"


def record_sign_in(request: Request, session: Session, profile: Dict[str, Any]) -> User:
    """
    OAuth callback hook: create the User on first sign-in and start a session.

    Args:
        request: Current request (its session is written).
        session: DB session.
        profile: {"email", "name", "image", "provider", "provider_id"}.

    Raises:
        ValueError: if the provider profile has no email.
    """
    email = (profile.get("email") or "").strip()
    if not email:
        raise ValueError("OAuth profile has no email")

    user = ensure_user(
        session,
        email=email,
        name=profile.get("name") or email,
        image=profile.get("image"),
        provider=profile.get("provider"),
        provider_id=profile.get("provider_id"),
    )
    request.session[SESSION_USER_KEY] = {"email": user.email, "name": user.name}
    return user


def clear_session(request: Request) -> None:
    request.session.pop(SESSION_USER_KEY, None)


def get_session_email(request: Request) -> str:
    """FastAPI dependency: the signed-in email, or 401."""
    identity: Optional[Dict[str, Any]] = request.session.get(SESSION_USER_KEY)
    email = identity.get("email") if isinstance(identity, dict) else None
    if not email:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return email
