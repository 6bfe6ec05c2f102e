"""
Activity data models: the persisted record and the per-kind payload shapes.

An inbound entry looks like

    {"timestamp": "2024-01-01T10:00:00Z", "type": "window",
     "data": {"processName": "chrome.exe", "windowTitle": "Example"}}

`type` selects the payload variant. Validation goes through
`parse_log_entry()`, which raises pydantic.ValidationError for an unknown
kind, a missing payload field, or an unparseable timestamp.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field as PydanticField, TypeAdapter, field_validator
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class ActivityKind(str, Enum):
    WINDOW = "window"
    BROWSER = "browser"
    KEYBOARD = "keyboard"
    MOUSE = "mouse"


# ─── Payload variants ─────────────────────────────────────────────────────────

class _Payload(BaseModel):
    # Unknown keys from newer collectors are dropped rather than rejected
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WindowData(_Payload):
    process_name: str = PydanticField(alias="processName")
    window_title: str = PydanticField(alias="windowTitle")


class BrowserData(_Payload):
    url: str
    browser_title: str = PydanticField(alias="browserTitle")
    browser_name: str = PydanticField(
        validation_alias=AliasChoices("browserName", "browserType", "browser_name"),
        serialization_alias="browserName",
    )


class KeyboardData(_Payload):
    pass


class MouseData(_Payload):
    pass


# ─── Entries (tagged union on "type") ─────────────────────────────────────────

class _Entry(BaseModel):
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        """Naive timestamps are taken as UTC; aware ones are converted."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        try:
            return value.astimezone(timezone.utc)
        except OverflowError:
            raise ValueError("timestamp is out of range once converted to UTC")


class WindowEntry(_Entry):
    type: Literal["window"]
    data: WindowData


class BrowserEntry(_Entry):
    type: Literal["browser"]
    data: BrowserData


class KeyboardEntry(_Entry):
    type: Literal["keyboard"]
    data: KeyboardData = PydanticField(default_factory=KeyboardData)


class MouseEntry(_Entry):
    type: Literal["mouse"]
    data: MouseData = PydanticField(default_factory=MouseData)


LogEntry = Annotated[
    Union[WindowEntry, BrowserEntry, KeyboardEntry, MouseEntry],
    PydanticField(discriminator="type"),
]

_log_entry_adapter: TypeAdapter = TypeAdapter(LogEntry)


def parse_log_entry(raw: Any) -> Union[WindowEntry, BrowserEntry, KeyboardEntry, MouseEntry]:
    """Validate one raw entry dict into its kind-specific model."""
    return _log_entry_adapter.validate_python(raw)


# ─── Persistence ──────────────────────────────────────────────────────────────

class ActivityRecord(SQLModel, table=True):
    """One observed event. Insert-only: never updated or deleted here."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    # Client-asserted event time (UTC)
    timestamp: datetime = Field(index=True)
    kind: str  # one of ActivityKind
    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    # Server bookkeeping, unrelated to `timestamp`
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ActivityRead(BaseModel):
    """Wire shape for a record on the read path."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    timestamp: datetime
    type: str = PydanticField(validation_alias=AliasChoices("kind", "type"))
    data: Dict[str, Any]
    created_at: datetime
    updated_at: datetime

    @field_validator("timestamp", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive values
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value
