"""Transcription schemas."""

from typing import List

from pydantic import BaseModel


class UtteranceResult(BaseModel):
    """Speaker-attributed span with timing in seconds."""

    speaker: str
    transcript: str
    start: float
    end: float


class TranscriptionResult(BaseModel):
    """What the transcription provider tells us about one recording."""

    transcript: str
    title: str | None = None
    short_summary: str | None = None
    topics: List[str] | None = None
    utterances: List[UtteranceResult] | None = None
