"""Session-authenticated activity log routes used by the dashboard."""
from typing import Any, List

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError
from sqlmodel import Session

from chronos.api.deps import get_event_store
from chronos.auth.session import get_session_email
from chronos.db.engine import get_session
from chronos.models.activity import ActivityRead
from chronos.store.events import EventStore
from chronos.store.users import UserNotFoundError, get_user_by_email

router = APIRouter()


def _resolve_user_id(session: Session, email: str) -> int:
    try:
        return get_user_by_email(session, email).id
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@router.get("", response_model=List[ActivityRead])
def list_logs(
    email: str = Depends(get_session_email),
    session: Session = Depends(get_session),
    store: EventStore = Depends(get_event_store),
):
    """Most recent records for the signed-in user, newest first."""
    user_id = _resolve_user_id(session, email)
    records = store.list_recent(user_id)
    return [ActivityRead.model_validate(r) for r in records]


@router.post("", response_model=ActivityRead, status_code=201)
def create_log(
    body: Any = Body(default=None),
    email: str = Depends(get_session_email),
    session: Session = Depends(get_session),
    store: EventStore = Depends(get_event_store),
):
    """Record a single entry for the signed-in user."""
    user_id = _resolve_user_id(session, email)
    if not isinstance(body, dict):
        raise HTTPException(status_code=422, detail="Invalid log entry")
    try:
        record = store.create(user_id, body.get("timestamp"), body.get("type"), body.get("data"))
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = ".".join(str(part) for part in first.get("loc", ()))
        raise HTTPException(status_code=422, detail=f"Invalid log entry: {loc} {first.get('msg')}".strip())
    return ActivityRead.model_validate(record)
