"""
Event store: insert and read back ActivityRecord rows.

Each create() is its own transaction, so a caller looping over a batch keeps
every earlier insert even when a later one fails.
"""
import logging
from typing import Any, List, Optional

from sqlmodel import Session, select

from chronos.config import get_settings
from chronos.models.activity import ActivityRecord, parse_log_entry

logger = logging.getLogger(__name__)


class EventStore:
    """Activity records for any user, backed by one SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def create(
        self,
        owner_user_id: int,
        timestamp: Any,
        kind: Any,
        payload: Optional[Any] = None,
    ) -> ActivityRecord:
        """
        Validate and persist one record.

        Args:
            owner_user_id: Owning user's primary key. Not checked here.
            timestamp: Client-asserted event time (datetime or ISO-8601 string).
            kind: One of "window", "browser", "keyboard", "mouse".
            payload: Kind-specific data dict.

        Returns:
            The persisted ActivityRecord (with id).

        Raises:
            pydantic.ValidationError: unknown kind, bad timestamp or payload.
            sqlalchemy.exc.SQLAlchemyError: the insert failed (rolled back).
        """
        raw = {"timestamp": timestamp, "type": kind}
        if payload is not None:
            raw["data"] = payload
        entry = parse_log_entry(raw)

        record = ActivityRecord(
            user_id=owner_user_id,
            timestamp=entry.timestamp,
            kind=entry.type,
            data=entry.data.model_dump(by_alias=True),
        )
        try:
            self.session.add(record)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(record)
        return record

    def list_recent(self, owner_user_id: int, limit: Optional[int] = None) -> List[ActivityRecord]:
        """Newest-first records for one user, capped at `limit` (default: logs_read_limit)."""
        if limit is None:
            limit = get_settings().logs_read_limit
        return list(
            self.session.exec(
                select(ActivityRecord)
                .where(ActivityRecord.user_id == owner_user_id)
                .order_by(ActivityRecord.timestamp.desc(), ActivityRecord.id.desc())
                .limit(limit)
            ).all()
        )
