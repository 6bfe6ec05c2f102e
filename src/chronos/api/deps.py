"""Shared FastAPI dependencies."""
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session

from chronos.auth.tokens import CollectorClaims, TokenError, verify_collector_token
from chronos.config import get_settings
from chronos.db.engine import get_session
from chronos.store.events import EventStore


def get_event_store(session: Session = Depends(get_session)) -> EventStore:
    return EventStore(session)


def require_collector(authorization: Optional[str] = Header(default=None)) -> CollectorClaims:
    """Authenticate a collector by its bearer token, or 401."""
    try:
        return verify_collector_token(authorization, get_settings().jwt_secret)
    except TokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
