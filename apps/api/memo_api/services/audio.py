"""Audio helpers used during ingestion."""

import asyncio
import logging
import math
import os
import tempfile
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from pydub import AudioSegment

from memo_api.core.observability import trace_function

logger = logging.getLogger(__name__)

FILE_EXTENSION = ".m4a"
AUDIO_CONTENT_TYPE = "audio/x-m4a"


@contextmanager
def scratch_file(data: bytes, suffix: str = FILE_EXTENSION) -> Iterator[Path]:
    """Write ``data`` to a uniquely named temp file, removed on every exit path."""
    path = Path(tempfile.gettempdir()) / f"{uuid.uuid4()}{suffix}"
    try:
        path.write_bytes(data)
        yield path
    finally:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass


def measure_duration(path: Path) -> float:
    """Return playback length of an audio file in seconds."""
    segment = AudioSegment.from_file(str(path))
    return segment.duration_seconds


class DurationProber:
    """Measures the duration of an in-memory audio buffer."""

    def __init__(self, suffix: str = FILE_EXTENSION) -> None:
        self.suffix = suffix

    @trace_function("duration_prober.probe_duration")
    async def probe_duration(self, audio: bytes) -> int:
        """Duration of ``audio`` rounded to the nearest whole second."""
        with scratch_file(audio, self.suffix) as path:
            seconds = await asyncio.to_thread(measure_duration, path)
        # Halves round up
        duration = int(math.floor(seconds + 0.5))
        logger.info("Measured audio duration", extra={"duration": duration})
        return duration
