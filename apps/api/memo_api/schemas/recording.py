"""Recording schemas.

Responses are serialized with camelCase keys (``createdAt``, ``recordingUrl``)
because that is what the mobile client reads.
"""

from datetime import datetime
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TopicOut(CamelModel):
    """Topic label."""

    id: str
    topic: str


class UtteranceOut(CamelModel):
    """Speaker utterance."""

    id: str
    speaker: str
    transcript: str
    start: float
    end: float


class RecordingOut(CamelModel):
    """Recording row without its children."""

    id: str
    user_id: str
    title: str
    file_path: str
    transcript: str
    summary: str
    duration: int
    created_at: datetime
    updated_at: datetime


class RecordingDetail(RecordingOut):
    """Recording with topics, utterances and a signed audio URL."""

    topics: List[TopicOut] = Field(default_factory=list)
    utterances: List[UtteranceOut] = Field(default_factory=list)
    recording_url: str = ""


class RecordingSummary(CamelModel):
    """List projection: no transcript, summary or utterances."""

    id: str
    title: str
    topics: List[TopicOut] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    duration: int


class RecordingUpdate(CamelModel):
    """Partial update of a recording."""

    title: str | None = Field(None, min_length=1, max_length=500)
    transcript: str | None = None


class DataResponse(BaseModel, Generic[T]):
    """Envelope every recordings endpoint answers with."""

    data: T
