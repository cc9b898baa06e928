"""HTTP client for the recordings API."""

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, List

import httpx

from memo_mobile.config import ClientSettings
from memo_mobile.models import Recording, RecordingDetails, RecordingSummary

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[str | None]]

AUDIO_CONTENT_TYPE = "audio/x-m4a"


class RecordingsClient:
    """Talks to ``/recordings`` with a bearer token and unwraps the ``data`` envelope.

    Non-2xx responses raise ``httpx.HTTPStatusError``.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or ClientSettings()
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=self.settings.api_url.rstrip("/"),
            timeout=self.settings.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "RecordingsClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _headers(self) -> dict[str, str]:
        token = None
        if self._token_provider is not None:
            token = await self._token_provider()
        token = token or self.settings.api_token
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, url, headers=await self._headers(), **kwargs)
        response.raise_for_status()
        return response.json()["data"]

    async def get_recording(self, recording_id: str) -> RecordingDetails | None:
        """Fetch one recording with topics, utterances and a signed audio URL."""
        data = await self._request("GET", f"/recordings/{recording_id}")
        logger.debug("Fetched recording details", extra={"recording_id": recording_id})
        return RecordingDetails.model_validate(data) if data is not None else None

    async def list_recordings(self) -> List[RecordingSummary]:
        """List the caller's recordings."""
        data = await self._request("GET", "/recordings/")
        return [RecordingSummary.model_validate(item) for item in data]

    async def upload_recording(self, audio: bytes, filename: str = "recording.m4a") -> Recording:
        """Upload audio for ingestion."""
        data = await self._request(
            "POST",
            "/recordings/",
            files={"file": (filename, audio, AUDIO_CONTENT_TYPE)},
        )
        return Recording.model_validate(data)

    async def update_recording(
        self,
        recording_id: str,
        title: str | None = None,
        transcript: str | None = None,
    ) -> Recording:
        """Rename a recording or correct its transcript."""
        body = {key: value for key, value in (("title", title), ("transcript", transcript)) if value is not None}
        data = await self._request("PATCH", f"/recordings/{recording_id}", json=body)
        return Recording.model_validate(data)

    async def delete_recording(self, recording_id: str) -> Recording:
        """Delete a recording."""
        data = await self._request("DELETE", f"/recordings/{recording_id}")
        return Recording.model_validate(data)

    async def download_audio(self, url: str, destination: Path) -> Path:
        """Stream a signed URL to ``destination``.

        No Authorization header: the signature in the URL is the credential.
        """
        destination.parent.mkdir(parents=True, exist_ok=True)
        partial = destination.with_name(f"{destination.name}.part")
        try:
            async with self._client.stream("GET", url) as response:
                response.raise_for_status()
                with open(partial, "wb") as handle:
                    async for chunk in response.aiter_bytes():
                        handle.write(chunk)
            partial.replace(destination)
        finally:
            partial.unlink(missing_ok=True)
        return destination
