"""Recording details screen: fetch, download, play."""

import asyncio
import functools
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

from memo_mobile.api import RecordingsClient
from memo_mobile.formatting import format_date, format_duration, format_time
from memo_mobile.models import RecordingDetails
from memo_mobile.player import AudioPlayer, PlaybackStatus, PlayerFactory, create_player

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load recording details"
AUDIO_FILE_EXTENSION = ".m4a"


class Phase(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    LOADED = "loaded"


class RecordingDetailsView:
    """State behind the details screen of one recording.

    ``mount`` runs the steps in data order: fetch the record, download its
    audio, build the player. Only one player is live per view; ``close``
    releases it. Failures are logged and reflected in the view state
    instead of being raised.
    """

    def __init__(
        self,
        recording_id: str,
        client: RecordingsClient,
        documents_dir: Path | None = None,
        player_factory: Optional[PlayerFactory] = None,
    ) -> None:
        self.recording_id = recording_id
        self.client = client
        self.documents_dir = Path(documents_dir or client.settings.documents_dir)
        self.player_factory = player_factory or functools.partial(
            create_player,
            progress_update_interval_ms=client.settings.progress_update_interval_ms,
        )

        self.phase = Phase.LOADING
        self.error: str | None = None
        self.details: RecordingDetails | None = None

        self.player: AudioPlayer | None = None
        self.is_playing = False
        self.is_loading_audio = False
        self.position_millis = 0
        self.duration_millis = 0
        self.closed = False

    async def mount(self) -> None:
        await self.load()
        if self.details is not None and self.details.recording_url:
            await self.download_audio(self.details.recording_url)

    async def load(self) -> None:
        """Fetch the record over HTTP."""
        self.phase = Phase.LOADING
        self.error = None
        try:
            self.details = await self.client.get_recording(self.recording_id)
            self.phase = Phase.LOADED
        except Exception:
            logger.exception("Error fetching recording details", extra={"recording_id": self.recording_id})
            self.error = LOAD_ERROR_MESSAGE
            self.phase = Phase.ERROR

    def audio_path(self) -> Path:
        return self.documents_dir / f"{self.recording_id}{AUDIO_FILE_EXTENSION}"

    async def download_audio(self, url: str) -> None:
        """Save the audio locally and bind a player to it."""
        self.is_loading_audio = True
        try:
            path = await self.client.download_audio(url, self.audio_path())
            logger.info("Downloaded audio", extra={"path": str(path)})
            player = await asyncio.to_thread(self.player_factory, path, self.on_playback_status)
            self._replace_player(player)
        except Exception:
            logger.exception("Error downloading audio", extra={"recording_id": self.recording_id})
        finally:
            self.is_loading_audio = False

    def _replace_player(self, player: AudioPlayer) -> None:
        if self.closed:
            # Screen went away while the audio was loading
            player.unload()
            return
        if self.player is not None:
            self.player.unload()
        self.player = player

    def on_playback_status(self, status: PlaybackStatus) -> None:
        if status.is_loaded:
            self.position_millis = status.position_millis
            self.duration_millis = status.duration_millis or 0
            if status.did_just_finish:
                self.is_playing = False

    async def toggle_playback(self) -> None:
        """Pause when playing, play otherwise."""
        if self.player is None:
            logger.info("No sound to play")
            return
        try:
            if self.is_playing:
                logger.info("Pausing sound")
                await asyncio.to_thread(self.player.pause)
                self.is_playing = False
            else:
                logger.info("Playing sound")
                await asyncio.to_thread(self.player.play)
                self.is_playing = True
        except Exception:
            logger.exception("Error playing recording")

    async def seek(self, position_millis: int) -> None:
        if self.player is None:
            return
        try:
            await asyncio.to_thread(self.player.seek, position_millis)
        except Exception:
            logger.exception("Error seeking recording")

    async def close(self) -> None:
        """Release the player (the screen is gone)."""
        self.closed = True
        if self.player is not None:
            player, self.player = self.player, None
            self.is_playing = False
            await asyncio.to_thread(player.unload)

    @property
    def progress(self) -> float:
        """Played fraction in ``[0, 1]``."""
        if not self.duration_millis:
            return 0.0
        return max(0.0, min(1.0, self.position_millis / self.duration_millis))

    def render(self) -> List[str]:
        """Text lines of the screen in its current state."""
        if self.phase is Phase.LOADING:
            return ["Loading..."]
        if self.phase is Phase.ERROR:
            return [self.error or LOAD_ERROR_MESSAGE]
        if self.details is None:
            return []

        details = self.details
        lines = [
            details.title,
            f"{format_date(details.created_at)}  {format_duration(details.duration)}",
        ]
        if details.summary:
            lines += ["", "Summary", details.summary]
        if details.utterances:
            lines += ["", "Conversation"]
            for utterance in details.utterances:
                lines.append(f"Speaker {utterance.speaker}  {format_duration(utterance.start)}")
                lines.append(utterance.transcript)

        if self.is_loading_audio:
            control = "[loading]"
        elif self.is_playing:
            control = "[pause]"
        else:
            control = "[play]"
        lines += ["", f"{control} {format_time(self.position_millis)} / {format_time(self.duration_millis)}"]
        return lines
