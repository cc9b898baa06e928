"""Database models."""

from memo_api.core.database import Base
from memo_api.models.recording import Recording, Topic, Utterance

__all__ = [
    "Base",
    "Recording",
    "Topic",
    "Utterance",
]
