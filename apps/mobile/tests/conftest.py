"""Fixtures for the client: a mock recordings API and a fake player."""

from pathlib import Path
from typing import Dict, List

import httpx
import pytest

from memo_mobile.api import RecordingsClient
from memo_mobile.config import ClientSettings
from memo_mobile.player import PlaybackStatus, StatusCallback

AUDIO_URL = "https://storage.test/recordings/user-1/rec-1.m4a?X-Amz-Signature=abc"


def recording_payload(**overrides) -> Dict:
    payload = {
        "id": "rec-1",
        "userId": "user-1",
        "title": "Weekly sync",
        "filePath": "user-1/rec-1.m4a",
        "transcript": "hi",
        "summary": "A short chat.",
        "duration": 75,
        "createdAt": "2024-03-04T15:04:00",
        "updatedAt": "2024-03-04T15:04:00",
        "topics": [{"id": "t-1", "topic": "greeting"}],
        "utterances": [
            {"id": "u-1", "speaker": "0", "transcript": "hi", "start": 0.0, "end": 1.0},
            {"id": "u-2", "speaker": "1", "transcript": "hello", "start": 62.0, "end": 63.5},
        ],
        "recordingUrl": AUDIO_URL,
    }
    payload.update(overrides)
    return payload


class MockApi:
    """Routes requests the way the backend and the storage host would."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.recording: Dict | None = recording_payload()
        self.audio = b"fake m4a bytes"
        self.fail_fetch = False
        self.fail_audio = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "storage.test":
            if self.fail_audio:
                return httpx.Response(403, text="expired")
            return httpx.Response(200, content=self.audio)
        if self.fail_fetch:
            return httpx.Response(500, json={"detail": "boom"})
        if request.method == "GET" and request.url.path == "/v1/recordings/rec-1":
            return httpx.Response(200, json={"data": self.recording})
        return httpx.Response(404, json={"detail": "Recording not found"})


class FakePlayer:
    def __init__(self, path: Path, on_status: StatusCallback) -> None:
        self.path = path
        self.on_status = on_status
        self.calls: List[str] = []
        self.duration_millis = 75_000

    def play(self) -> None:
        self.calls.append("play")

    def pause(self) -> None:
        self.calls.append("pause")

    def seek(self, position_millis: int) -> None:
        self.calls.append(f"seek:{position_millis}")

    def unload(self) -> None:
        self.calls.append("unload")

    def report(self, position_millis: int, did_just_finish: bool = False) -> None:
        self.on_status(
            PlaybackStatus(
                is_loaded=True,
                position_millis=position_millis,
                duration_millis=self.duration_millis,
                did_just_finish=did_just_finish,
            )
        )


@pytest.fixture
def mock_api() -> MockApi:
    return MockApi()


@pytest.fixture
def settings(tmp_path) -> ClientSettings:
    return ClientSettings(
        api_url="http://api.test/v1",
        documents_dir=tmp_path / "documents",
    )


@pytest.fixture
async def client(settings, mock_api):
    async def token_provider() -> str:
        return "token-123"

    api = RecordingsClient(settings, token_provider=token_provider, transport=httpx.MockTransport(mock_api))
    yield api
    await api.aclose()


@pytest.fixture
def players() -> List[FakePlayer]:
    return []


@pytest.fixture
def player_factory(players):
    def factory(path: Path, on_status: StatusCallback) -> FakePlayer:
        player = FakePlayer(path, on_status)
        players.append(player)
        return player

    return factory


@pytest.fixture
def audio_url() -> str:
    return AUDIO_URL
