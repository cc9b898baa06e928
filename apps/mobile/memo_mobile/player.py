"""Local audio playback."""

import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol

from pydub import AudioSegment

logger = logging.getLogger(__name__)


class PlayerError(RuntimeError):
    """Raised when playback cannot be set up."""


@dataclass
class PlaybackStatus:
    """Snapshot reported to the status callback."""

    is_loaded: bool
    position_millis: int = 0
    duration_millis: int = 0
    is_playing: bool = False
    did_just_finish: bool = False


StatusCallback = Callable[[PlaybackStatus], None]


class AudioPlayer(Protocol):
    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, position_millis: int) -> None: ...

    def unload(self) -> None: ...


PlayerFactory = Callable[[Path, StatusCallback], AudioPlayer]


class SoundDevicePlayer:
    """Decodes a file with pydub and streams PCM through PortAudio."""

    def __init__(
        self,
        path: Path,
        on_status: Optional[StatusCallback] = None,
        progress_update_interval_ms: int = 500,
    ) -> None:
        try:
            import sounddevice as sd
        except ImportError as exc:  # pragma: no cover - depends on the install
            raise PlayerError("sounddevice dependency is required for playback") from exc

        self._sd = sd
        self._on_status = on_status
        self._interval = progress_update_interval_ms / 1000.0

        segment = AudioSegment.from_file(str(path)).set_sample_width(2)
        self._data = segment.raw_data
        self._frame_rate = segment.frame_rate
        self._channels = segment.channels
        self._frame_width = segment.frame_width
        self._duration_millis = len(segment)

        self._lock = threading.Lock()
        self._offset = 0
        self._stream = None
        self._last_report = 0.0
        self._loaded = True

        self._emit()

    @property
    def position_millis(self) -> int:
        frames = self._offset // self._frame_width
        return int(frames * 1000 / self._frame_rate)

    @property
    def is_playing(self) -> bool:
        return self._stream is not None and self._stream.active

    def _emit(self, did_just_finish: bool = False) -> None:
        if self._on_status is None:
            return
        self._on_status(
            PlaybackStatus(
                is_loaded=self._loaded,
                position_millis=self.position_millis,
                duration_millis=self._duration_millis,
                is_playing=self.is_playing and not did_just_finish,
                did_just_finish=did_just_finish,
            )
        )

    def _callback(self, outdata, frames, time_info, status) -> None:
        wanted = frames * self._frame_width
        with self._lock:
            chunk = self._data[self._offset:self._offset + wanted]
            self._offset += len(chunk)
        outdata[:len(chunk)] = chunk
        if len(chunk) < wanted:
            outdata[len(chunk):] = b"\x00" * (wanted - len(chunk))
            raise self._sd.CallbackStop

        now = time.monotonic()
        if now - self._last_report >= self._interval:
            self._last_report = now
            self._emit()

    def _finished(self) -> None:
        with self._lock:
            reached_end = self._offset >= len(self._data)
        if reached_end:
            self._emit(did_just_finish=True)

    def play(self) -> None:
        if not self._loaded:
            raise PlayerError("Player has been unloaded")
        if self.is_playing:
            return
        self._close_stream()
        with self._lock:
            if self._offset >= len(self._data):
                self._offset = 0
        self._stream = self._sd.RawOutputStream(
            samplerate=self._frame_rate,
            channels=self._channels,
            dtype="int16",
            callback=self._callback,
            finished_callback=self._finished,
        )
        self._stream.start()
        logger.debug("Playback started", extra={"position_millis": self.position_millis})
        self._emit()

    def pause(self) -> None:
        self._close_stream()
        logger.debug("Playback paused", extra={"position_millis": self.position_millis})
        self._emit()

    def seek(self, position_millis: int) -> None:
        frame = int(max(0, min(position_millis, self._duration_millis)) * self._frame_rate / 1000)
        with self._lock:
            self._offset = min(frame * self._frame_width, len(self._data))
        self._emit()

    def unload(self) -> None:
        self._close_stream()
        self._loaded = False
        self._data = b""
        self._offset = 0

    def _close_stream(self) -> None:
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        stream.stop()
        stream.close()


def create_player(
    path: Path,
    on_status: StatusCallback,
    progress_update_interval_ms: int = 500,
) -> AudioPlayer:
    """Default player factory."""
    return SoundDevicePlayer(path, on_status, progress_update_interval_ms)
