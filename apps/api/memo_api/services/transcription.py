"""Transcription service backed by Deepgram, with optional OpenAI titles."""

import logging
from typing import Any, Dict, List

import httpx
import openai

from memo_api.core.config import settings
from memo_api.core.errors import TranscriptionError
from memo_api.core.feature_flags import is_enabled
from memo_api.core.observability import trace_function
from memo_api.schemas.transcription import TranscriptionResult, UtteranceResult
from memo_api.services.audio import AUDIO_CONTENT_TYPE

logger = logging.getLogger(__name__)

TITLE_PROMPT = (
    "Write a short title (at most six words) for this voice memo transcript. "
    "Reply with the title only, without quotes."
)


class TranscriptionService:
    """Sends audio to Deepgram and maps the response to a ``TranscriptionResult``."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        openai_client: openai.AsyncOpenAI | None = None,
        api_key: str | None = None,
        url: str | None = None,
        model: str | None = None,
    ) -> None:
        self.http_client = http_client
        self.api_key = api_key if api_key is not None else settings.DEEPGRAM_API_KEY
        self.url = url or settings.DEEPGRAM_URL
        self.model = model or settings.DEEPGRAM_MODEL
        self.title_model = settings.OPENAI_TITLE_MODEL

        if openai_client is None and settings.OPENAI_API_KEY:
            openai_client = openai.AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        self.openai_client = openai_client

    def _params(self) -> Dict[str, str]:
        return {
            "model": self.model,
            "smart_format": "true",
            "diarize": "true",
            "utterances": "true",
            "summarize": "v2",
            "topics": "true",
        }

    @trace_function("transcription_service.transcribe")
    async def transcribe(self, audio: bytes) -> TranscriptionResult:
        """Transcribe an audio buffer."""
        payload = await self._listen(audio)
        result = parse_deepgram_response(payload)

        if result.transcript and self.openai_client is not None and is_enabled("enable_title_generation"):
            result.title = await self.generate_title(result.transcript)

        logger.info(
            "File transcribed",
            extra={
                "topics": len(result.topics or []),
                "utterances": len(result.utterances or []),
            },
        )
        return result

    async def _listen(self, audio: bytes) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Token {self.api_key}",
            "Content-Type": AUDIO_CONTENT_TYPE,
        }
        if self.http_client is not None:
            response = await self.http_client.post(
                self.url, params=self._params(), headers=headers, content=audio
            )
        else:
            # Pre-recorded transcription of long memos can take minutes
            async with httpx.AsyncClient(timeout=None) as client:
                response = await client.post(
                    self.url, params=self._params(), headers=headers, content=audio
                )

        if response.status_code >= 400:
            raise TranscriptionError(
                f"Transcription request failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )
        return response.json()

    @trace_function("transcription_service.generate_title")
    async def generate_title(self, transcript: str) -> str | None:
        """Ask the LLM for a short title."""
        response = await self.openai_client.chat.completions.create(
            model=self.title_model,
            messages=[
                {"role": "system", "content": TITLE_PROMPT},
                {"role": "user", "content": transcript[:8000]},
            ],
            max_tokens=24,
            temperature=0.3,
        )
        content = response.choices[0].message.content or ""
        title = content.strip().strip('"').strip()
        return title or None


def parse_deepgram_response(payload: Dict[str, Any]) -> TranscriptionResult:
    """Map a Deepgram ``/v1/listen`` response body."""
    results = payload.get("results") or {}

    transcript = ""
    channels = results.get("channels") or []
    if channels:
        alternatives = channels[0].get("alternatives") or []
        if alternatives:
            transcript = alternatives[0].get("transcript") or ""

    summary = results.get("summary") or {}
    short_summary = summary.get("short") if summary.get("result", "success") == "success" else None

    topics: List[str] | None = None
    segments = (results.get("topics") or {}).get("segments")
    if segments is not None:
        topics = []
        for segment in segments:
            for entry in segment.get("topics") or []:
                label = entry.get("topic")
                if label and label not in topics:
                    topics.append(label)

    utterances: List[UtteranceResult] | None = None
    raw_utterances = results.get("utterances")
    if raw_utterances is not None:
        utterances = [
            UtteranceResult(
                speaker=str(item.get("speaker", 0)),
                transcript=item.get("transcript", ""),
                start=float(item.get("start", 0.0)),
                end=float(item.get("end", 0.0)),
            )
            for item in raw_utterances
        ]

    return TranscriptionResult(
        transcript=transcript,
        title=None,
        short_summary=short_summary,
        topics=topics,
        utterances=utterances,
    )
