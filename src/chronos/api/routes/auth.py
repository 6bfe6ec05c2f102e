"""Sync token issuance and session identity routes."""
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlmodel import Session

from chronos.auth.session import clear_session, get_session_email
from chronos.auth.tokens import TOKEN_INSTRUCTIONS, issue_collector_token
from chronos.config import get_settings
from chronos.db.engine import get_session
from chronos.models.user import User
from chronos.store.users import UserNotFoundError, get_user_by_email

router = APIRouter()


class TokenResponse(BaseModel):
    token: str
    message: str


class MeResponse(BaseModel):
    id: int
    email: str
    name: str
    image: Optional[str] = None
    provider: Optional[str] = None


def _current_user(email: str, session: Session) -> User:
    try:
        return get_user_by_email(session, email)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@router.post("/token", response_model=TokenResponse)
def create_token(
    email: str = Depends(get_session_email),
    session: Session = Depends(get_session),
):
    """Issue a long-lived sync token for the signed-in user's collector."""
    user = _current_user(email, session)
    settings = get_settings()
    token = issue_collector_token(
        user,
        settings.jwt_secret,
        ttl=timedelta(days=settings.token_ttl_days),
    )
    return TokenResponse(token=token, message=TOKEN_INSTRUCTIONS)


@router.get("/me", response_model=MeResponse)
def me(
    email: str = Depends(get_session_email),
    session: Session = Depends(get_session),
):
    user = _current_user(email, session)
    return MeResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        image=user.image,
        provider=user.provider,
    )


@router.post("/logout", status_code=204)
def logout(request: Request):
    clear_session(request)
