"""Recording, topic and utterance models."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memo_api.core.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Recording(Base):
    """One ingested voice memo."""

    __tablename__ = "recordings"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    recording_url: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    transcript: Mapped[str] = mapped_column(Text, nullable=False, default="")
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow
    )

    # Relationships
    topics: Mapped[list["Topic"]] = relationship(
        "Topic",
        back_populates="recording",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    utterances: Mapped[list["Utterance"]] = relationship(
        "Utterance",
        back_populates="recording",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Utterance.start",
    )


class Topic(Base):
    """Topic label derived from a recording's transcript."""

    __tablename__ = "topics"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    recording_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("recordings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    topic: Mapped[str] = mapped_column(String(255), nullable=False)

    recording: Mapped["Recording"] = relationship(
        "Recording",
        back_populates="topics"
    )


class Utterance(Base):
    """Speaker-attributed span of a transcript with timing offsets in seconds."""

    __tablename__ = "utterances"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    recording_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("recordings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    speaker: Mapped[str] = mapped_column(String(100), nullable=False)
    transcript: Mapped[str] = mapped_column(Text, nullable=False)
    start: Mapped[float] = mapped_column(Float, nullable=False)
    end: Mapped[float] = mapped_column(Float, nullable=False)

    recording: Mapped["Recording"] = relationship(
        "Recording",
        back_populates="utterances"
    )
