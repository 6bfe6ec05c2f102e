"""User lookup and first-sign-in creation."""
import logging
from typing import Optional

from sqlmodel import Session, select

from chronos.models.user import User

logger = logging.getLogger(__name__)


class UserNotFoundError(LookupError):
    """Raised when no User row matches the requested identity."""


def get_user_by_email(session: Session, email: str) -> User:
    """
    Raises:
        UserNotFoundError: if no user has this email.
    """
    user = session.exec(select(User).where(User.email == email)).first()
    if user is None:
        raise UserNotFoundError(f"No user with email {email!r}")
    return user


def ensure_user(
    session: Session,
    *,
    email: str,
    name: str,
    image: Optional[str] = None,
    provider: Optional[str] = None,
    provider_id: Optional[str] = None,
) -> User:
    """Return the user for `email`, creating it on first sign-in.

    An existing user is returned untouched: the provider binding recorded at
    creation is never re-linked.
    """
    existing = session.exec(select(User).where(User.email == email)).first()
    if existing is not None:
        return existing

    user = User(
        email=email,
        name=name,
        image=image,
        provider=provider,
        provider_id=provider_id,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Created user %s via %s", email, provider or "unknown provider")
    return user
