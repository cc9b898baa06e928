"""Request-scoped dependencies."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from memo_api.core.database import get_db
from memo_api.services.audio import DurationProber
from memo_api.services.recordings import RecordingService
from memo_api.services.storage import StorageService
from memo_api.services.transcription import TranscriptionService


def get_storage(request: Request) -> StorageService:
    """Object storage service for the app."""
    return request.app.state.storage


def get_transcriber(request: Request) -> TranscriptionService:
    """Transcription service for the app."""
    return request.app.state.transcriber


def get_prober(request: Request) -> DurationProber:
    """Duration prober for the app."""
    return request.app.state.prober


def get_recording_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage),
    transcriber: TranscriptionService = Depends(get_transcriber),
    prober: DurationProber = Depends(get_prober),
) -> RecordingService:
    """Build the recording service for one request."""
    return RecordingService(db, storage, transcriber, prober)
