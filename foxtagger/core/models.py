"""
Database models for FoxTagger.

Models: PersistentState.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class PersistentState(Base):
    """
    The whole persisted ledger as one JSON blob.

    There is at most one row. Every write replaces the blob in full.
    """

    __tablename__ = "persistent_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    blob: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        return f"<PersistentState {self.id}: {len(self.blob)} bytes @ {self.updated_at}>"
