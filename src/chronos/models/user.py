"""User identity model."""
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """One row per signed-in person. Created on first OAuth sign-in."""

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    name: str
    image: Optional[str] = None

    # Provider binding is fixed at creation; no re-linking
    provider: Optional[str] = None  # "google", "github"
    provider_id: Optional[str] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
