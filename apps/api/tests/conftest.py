"""Shared fixtures: an on-disk SQLite database and in-memory doubles for external services."""

from typing import Dict, List

import pytest
from fastapi.testclient import TestClient

from memo_api.core.database import Database
from memo_api.core.security import security_manager
from memo_api.main import create_app
from memo_api.schemas.transcription import TranscriptionResult, UtteranceResult
from memo_api.services.recordings import RecordingService


class FakeStorage:
    """Bucket kept in a dict; signed URLs point at a fake host."""

    def __init__(self) -> None:
        self.objects: Dict[str, bytes] = {}
        self.content_types: Dict[str, str] = {}
        self.deleted: List[str] = []

    def upload_buffer(self, path: str, data: bytes, content_type: str) -> str:
        self.objects[path] = data
        self.content_types[path] = content_type
        return path

    def generate_presigned_url(self, path: str, expires_in: int | None = None) -> str:
        return f"https://storage.test/recordings/{path}?X-Amz-Signature=test"

    def delete_object(self, path: str) -> None:
        self.deleted.append(path)
        self.objects.pop(path, None)

    def fetch(self, url: str) -> bytes:
        path = url.split("https://storage.test/recordings/", 1)[1].split("?", 1)[0]
        return self.objects[path]


class FakeTranscriber:
    def __init__(self, result: TranscriptionResult) -> None:
        self.result = result
        self.calls: List[bytes] = []
        self.error: Exception | None = None

    async def transcribe(self, audio: bytes) -> TranscriptionResult:
        self.calls.append(audio)
        if self.error is not None:
            raise self.error
        return self.result.model_copy(deep=True)


class FakeProber:
    def __init__(self, duration: int = 42) -> None:
        self.duration = duration

    async def probe_duration(self, audio: bytes) -> int:
        return self.duration


AUDIO = b"\x00\x00\x00\x18ftypM4A fake audio payload"


@pytest.fixture
def audio() -> bytes:
    return AUDIO


@pytest.fixture
def transcription_result() -> TranscriptionResult:
    return TranscriptionResult(
        transcript="hi",
        title=None,
        short_summary="s",
        topics=["greeting"],
        utterances=[UtteranceResult(speaker="A", transcript="hi", start=0, end=1)],
    )


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def transcriber(transcription_result: TranscriptionResult) -> FakeTranscriber:
    return FakeTranscriber(transcription_result)


@pytest.fixture
def prober() -> FakeProber:
    return FakeProber(42)


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'memos.db'}"


@pytest.fixture
async def database(database_url: str):
    db = Database(database_url)
    await db.connect()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database: Database):
    async with database.session() as session:
        yield session


@pytest.fixture
def service(session, storage, transcriber, prober) -> RecordingService:
    return RecordingService(session, storage, transcriber, prober)


@pytest.fixture
def app(database_url, storage, transcriber, prober):
    return create_app(
        database=Database(database_url),
        storage=storage,
        transcriber=transcriber,
        prober=prober,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    token = security_manager.create_access_token("user-1")
    return {"Authorization": f"Bearer {token}"}
