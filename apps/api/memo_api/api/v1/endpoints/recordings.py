"""Recording endpoints."""

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from memo_api.api.deps import get_recording_service
from memo_api.core.observability import trace_function
from memo_api.core.security import get_current_user_id
from memo_api.schemas.recording import (
    DataResponse,
    RecordingDetail,
    RecordingOut,
    RecordingSummary,
    RecordingUpdate,
)
from memo_api.services.recordings import RecordingService

router = APIRouter()


@router.post(
    "/",
    response_model=DataResponse[RecordingOut],
    status_code=status.HTTP_201_CREATED,
)
@trace_function("recordings_endpoint.create_recording")
async def create_recording(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    service: RecordingService = Depends(get_recording_service),
) -> DataResponse[RecordingOut]:
    """Upload audio and ingest it."""
    body = await file.read()
    if not body:
        raise HTTPException(status_code=400, detail="Empty file")

    recording = await service.create_recording(user_id, body)
    return DataResponse[RecordingOut](data=recording)


@router.get("/", response_model=DataResponse[List[RecordingSummary]])
@trace_function("recordings_endpoint.list_recordings")
async def list_recordings(
    user_id: str = Depends(get_current_user_id),
    service: RecordingService = Depends(get_recording_service),
) -> DataResponse[List[RecordingSummary]]:
    """List the caller's recordings."""
    recordings = await service.list_recordings(user_id)
    return DataResponse[List[RecordingSummary]](data=recordings)


@router.get("/{recording_id}", response_model=DataResponse[RecordingDetail | None])
@trace_function("recordings_endpoint.get_recording")
async def get_recording(
    recording_id: str,
    service: RecordingService = Depends(get_recording_service),
) -> DataResponse[RecordingDetail | None]:
    """Get one recording; ``data`` is null when it does not exist."""
    recording = await service.get_recording(recording_id)
    return DataResponse[RecordingDetail | None](data=recording)


@router.patch("/{recording_id}", response_model=DataResponse[RecordingOut])
@trace_function("recordings_endpoint.update_recording")
async def update_recording(
    recording_id: str,
    update: RecordingUpdate,
    service: RecordingService = Depends(get_recording_service),
) -> DataResponse[RecordingOut]:
    """Rename a recording or correct its transcript."""
    recording = await service.update_recording(
        recording_id,
        title=update.title,
        transcript=update.transcript,
    )
    return DataResponse[RecordingOut](data=recording)


@router.delete("/{recording_id}", response_model=DataResponse[RecordingOut])
@trace_function("recordings_endpoint.delete_recording")
async def delete_recording(
    recording_id: str,
    service: RecordingService = Depends(get_recording_service),
) -> DataResponse[RecordingOut]:
    """Delete a recording and its topics and utterances."""
    recording = await service.delete_recording(recording_id)
    return DataResponse[RecordingOut](data=recording)
