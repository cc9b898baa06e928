"""Payloads returned by the recordings API."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Topic(ApiModel):
    id: str
    topic: str


class Utterance(ApiModel):
    id: str
    speaker: str
    transcript: str
    start: float
    end: float


class RecordingSummary(ApiModel):
    id: str
    title: str
    created_at: datetime
    updated_at: datetime | None = None
    duration: int
    topics: List[Topic] = Field(default_factory=list)


class Recording(ApiModel):
    id: str
    title: str
    created_at: datetime
    updated_at: datetime | None = None
    duration: int
    file_path: str | None = None
    summary: str | None = None
    transcript: str | None = None


class RecordingDetails(Recording):
    topics: List[Topic] = Field(default_factory=list)
    utterances: List[Utterance] = Field(default_factory=list)
    recording_url: str = ""
