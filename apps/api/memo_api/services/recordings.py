"""Recording ingestion and retrieval."""

import logging
import uuid
from datetime import date
from typing import List, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only, selectinload

from memo_api.core.feature_flags import is_enabled
from memo_api.core.observability import trace_function
from memo_api.models.recording import Recording, Topic, Utterance
from memo_api.schemas.recording import (
    RecordingDetail,
    RecordingOut,
    RecordingSummary,
)
from memo_api.schemas.transcription import TranscriptionResult
from memo_api.services.audio import AUDIO_CONTENT_TYPE, FILE_EXTENSION

logger = logging.getLogger(__name__)


class Storage(Protocol):
    def upload_buffer(self, path: str, data: bytes, content_type: str) -> str: ...

    def generate_presigned_url(self, path: str, expires_in: int | None = None) -> str: ...

    def delete_object(self, path: str) -> None: ...


class Transcriber(Protocol):
    async def transcribe(self, audio: bytes) -> TranscriptionResult: ...


class Prober(Protocol):
    async def probe_duration(self, audio: bytes) -> int: ...


def default_title(today: date | None = None) -> str:
    """Placeholder title, e.g. ``conversation_10/18/2026``."""
    today = today or date.today()
    return f"conversation_{today.month}/{today.day}/{today.year}"


def build_file_path(user_id: str, recording_id: str) -> str:
    """Object key for a recording's audio."""
    return f"{user_id}/{recording_id}{FILE_EXTENSION}"


class RecordingService:
    """Composes storage, transcription and persistence into recording operations.

    Every external call is awaited one after another; nothing is retried.
    """

    def __init__(
        self,
        session: AsyncSession,
        storage: Storage,
        transcriber: Transcriber,
        prober: Prober,
    ) -> None:
        self.session = session
        self.storage = storage
        self.transcriber = transcriber
        self.prober = prober

    @trace_function("recording_service.create_recording")
    async def create_recording(self, user_id: str, body: bytes) -> RecordingOut:
        """Ingest an uploaded audio buffer."""
        duration = await self.prober.probe_duration(body)
        logger.info("Probed duration", extra={"duration": duration})

        result = await self.transcriber.transcribe(body)

        recording_id = str(uuid.uuid4())
        file_path = build_file_path(user_id, recording_id)
        self.storage.upload_buffer(file_path, body, AUDIO_CONTENT_TYPE)

        recording = Recording(
            id=recording_id,
            user_id=user_id,
            title=result.title or default_title(),
            recording_url="",
            file_path=file_path,
            transcript=result.transcript,
            summary=result.short_summary or "",
            duration=duration,
            topics=[Topic(topic=topic) for topic in result.topics or []],
            utterances=[
                Utterance(
                    speaker=utterance.speaker,
                    transcript=utterance.transcript,
                    start=utterance.start,
                    end=utterance.end,
                )
                for utterance in result.utterances or []
            ],
        )
        self.session.add(recording)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            if is_enabled("enable_storage_cleanup"):
                self._discard_audio(file_path)
            raise

        logger.info("Created recording", extra={"recording_id": recording_id})
        return RecordingOut.model_validate(recording)

    @trace_function("recording_service.get_recording")
    async def get_recording(self, recording_id: str) -> RecordingDetail | None:
        """Recording with children and a signed URL, or ``None``."""
        recording = await self.session.scalar(
            select(Recording)
            .where(Recording.id == recording_id)
            .options(selectinload(Recording.topics), selectinload(Recording.utterances))
        )
        if recording is None:
            return None

        recording_url = self.storage.generate_presigned_url(recording.file_path)
        return RecordingDetail.model_validate(recording).model_copy(
            update={"recording_url": recording_url}
        )

    @trace_function("recording_service.list_recordings")
    async def list_recordings(self, user_id: str) -> List[RecordingSummary]:
        """A user's recordings without transcript, summary or utterances."""
        result = await self.session.scalars(
            select(Recording)
            .where(Recording.user_id == user_id)
            .options(
                load_only(
                    Recording.id,
                    Recording.title,
                    Recording.created_at,
                    Recording.updated_at,
                    Recording.duration,
                ),
                selectinload(Recording.topics),
            )
            .order_by(Recording.created_at.desc())
        )
        return [RecordingSummary.model_validate(recording) for recording in result]

    @trace_function("recording_service.delete_recording")
    async def delete_recording(self, recording_id: str) -> RecordingOut:
        """Delete a recording; topics and utterances cascade.

        Raises ``NoResultFound`` for an unknown id.
        """
        recording = (
            await self.session.execute(select(Recording).where(Recording.id == recording_id))
        ).scalar_one()
        deleted = RecordingOut.model_validate(recording)

        await self.session.delete(recording)
        await self.session.commit()

        if is_enabled("enable_storage_cleanup"):
            self._discard_audio(recording.file_path)
        return deleted

    @trace_function("recording_service.update_recording")
    async def update_recording(
        self,
        recording_id: str,
        title: str | None = None,
        transcript: str | None = None,
    ) -> RecordingOut:
        """Overwrite title and/or transcript; ``None`` leaves a field as is.

        Raises ``NoResultFound`` for an unknown id.
        """
        recording = (
            await self.session.execute(select(Recording).where(Recording.id == recording_id))
        ).scalar_one()

        if title is not None:
            recording.title = title
        if transcript is not None:
            recording.transcript = transcript

        await self.session.commit()
        await self.session.refresh(recording)
        return RecordingOut.model_validate(recording)

    def _discard_audio(self, file_path: str) -> None:
        try:
            self.storage.delete_object(file_path)
        except Exception:
            # Best effort; the row is the source of truth
            logger.warning(
                "Failed to remove stored audio",
                extra={"file_path": file_path},
                exc_info=True,
            )
