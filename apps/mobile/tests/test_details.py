"""Recording details view tests."""

from memo_mobile import details as details_module
from memo_mobile.details import LOAD_ERROR_MESSAGE, Phase, RecordingDetailsView


def _view(client, settings, player_factory) -> RecordingDetailsView:
    return RecordingDetailsView("rec-1", client, player_factory=player_factory)


async def test_mount_loads_downloads_and_binds_player(client, settings, mock_api, players, player_factory):
    """Test mount fetches details, saves the audio and builds one player."""
    view = _view(client, settings, player_factory)

    await view.mount()

    assert view.phase is Phase.LOADED
    assert view.details.title == "Weekly sync"
    target = settings.documents_dir / "rec-1.m4a"
    assert target.read_bytes() == mock_api.audio
    assert len(players) == 1
    assert players[0].path == target
    assert view.player is players[0]
    assert view.is_loading_audio is False
    assert [request.url.host for request in mock_api.requests] == ["api.test", "storage.test"]


async def test_fetch_failure_sets_error(client, settings, mock_api, players, player_factory):
    """Test a failed fetch shows the error and skips the download."""
    mock_api.fail_fetch = True
    view = _view(client, settings, player_factory)

    await view.mount()

    assert view.phase is Phase.ERROR
    assert view.error == LOAD_ERROR_MESSAGE
    assert view.render() == [LOAD_ERROR_MESSAGE]
    assert players == []
    assert len(mock_api.requests) == 1


async def test_audio_failure_leaves_details_visible(client, settings, mock_api, players, player_factory):
    """Test a failed download keeps the details and binds no player."""
    mock_api.fail_audio = True
    view = _view(client, settings, player_factory)

    await view.mount()

    assert view.phase is Phase.LOADED
    assert view.player is None
    assert view.is_loading_audio is False
    assert players == []
    assert view.render()[0] == "Weekly sync"


async def test_missing_recording_renders_nothing(client, settings, mock_api, players, player_factory):
    """Test a null record loads without downloading anything."""
    mock_api.recording = None
    view = _view(client, settings, player_factory)

    await view.mount()

    assert view.phase is Phase.LOADED
    assert view.details is None
    assert view.render() == []
    assert players == []


async def test_no_audio_url_skips_download(client, settings, mock_api, players, player_factory):
    """Test an empty signed URL means no download."""
    mock_api.recording["recordingUrl"] = ""
    view = _view(client, settings, player_factory)

    await view.mount()

    assert view.player is None
    assert len(mock_api.requests) == 1


async def test_toggle_playback(client, settings, players, player_factory):
    """Test play and pause alternate on the bound player."""
    view = _view(client, settings, player_factory)
    await view.mount()

    await view.toggle_playback()
    assert view.is_playing is True
    await view.toggle_playback()
    assert view.is_playing is False
    assert players[0].calls == ["play", "pause"]


async def test_toggle_without_player_is_noop(client, settings, player_factory):
    """Test toggling before any audio loads does nothing."""
    view = _view(client, settings, player_factory)

    await view.toggle_playback()

    assert view.is_playing is False


async def test_status_updates_progress_and_finish(client, settings, players, player_factory):
    """Test status reports drive the position and clear playing at the end."""
    view = _view(client, settings, player_factory)
    await view.mount()
    await view.toggle_playback()

    players[0].report(30_000)
    assert view.position_millis == 30_000
    assert view.duration_millis == 75_000
    assert view.progress == 0.4
    assert view.is_playing is True

    players[0].report(75_000, did_just_finish=True)
    assert view.is_playing is False
    assert view.progress == 1.0


async def test_seek_forwards_to_player(client, settings, players, player_factory):
    """Test seeking reaches the player."""
    view = _view(client, settings, player_factory)
    await view.mount()

    await view.seek(12_000)

    assert players[0].calls == ["seek:12000"]


async def test_close_unloads_player(client, settings, players, player_factory):
    """Test closing the screen releases the player."""
    view = _view(client, settings, player_factory)
    await view.mount()
    await view.toggle_playback()

    await view.close()

    assert view.player is None
    assert view.is_playing is False
    assert players[0].calls[-1] == "unload"


async def test_reloading_audio_replaces_player(client, settings, audio_url, players, player_factory):
    """Test a second download unloads the previous player."""
    view = _view(client, settings, player_factory)
    await view.mount()

    await view.download_audio(audio_url)

    assert len(players) == 2
    assert players[0].calls == ["unload"]
    assert view.player is players[1]


async def test_render_loaded(client, settings, players, player_factory):
    """Test the loaded screen lists title, summary, utterances and controls."""
    view = _view(client, settings, player_factory)
    await view.mount()
    players[0].report(62_000)

    assert view.render() == [
        "Weekly sync",
        "Monday, March 4 at 3:04 PM  1:15",
        "",
        "Summary",
        "A short chat.",
        "",
        "Conversation",
        "Speaker 0  0:00",
        "hi",
        "Speaker 1  1:02",
        "hello",
        "",
        "[play] 1:02 / 1:15",
    ]


async def test_render_while_loading(client, settings, player_factory):
    """Test the initial state shows a loading line."""
    assert _view(client, settings, player_factory).render() == ["Loading..."]


async def test_close_during_download_unloads_late_player(client, settings, players, player_factory):
    """Test a player built after the screen closed is released right away."""
    view = _view(client, settings, player_factory)
    await view.load()

    async def close_first(url, destination):
        await view.close()
        return await original(url, destination)

    original = client.download_audio
    client.download_audio = close_first

    await view.download_audio(view.details.recording_url)

    assert view.player is None
    assert players[0].calls == ["unload"]


async def test_default_player_uses_configured_interval(client, settings, monkeypatch):
    """Test the default factory passes the progress interval from settings."""
    built = []

    def fake_create_player(path, on_status, progress_update_interval_ms=500):
        built.append(progress_update_interval_ms)
        return FakeSound()

    class FakeSound:
        def unload(self) -> None:
            pass

    monkeypatch.setattr(details_module, "create_player", fake_create_player)
    settings.progress_update_interval_ms = 250
    view = RecordingDetailsView("rec-1", client)

    await view.mount()

    assert built == [250]
    assert isinstance(view.player, FakeSound)
