"""Tests for the embedded player adapter: queueing, ordering and error semantics."""

import asyncio

import pytest

from conftest import FakePlayerBackend
from myoozik.client.player import EmbeddedPlayerAdapter, PlayerState
from myoozik.core.exceptions import PlayerInitError

pytestmark = pytest.mark.asyncio


@pytest.fixture
def backend():
    return FakePlayerBackend()


@pytest.fixture
def events():
    return {"states": [], "ended": 0, "errors": []}


@pytest.fixture
async def make_adapter(events):
    created = []

    def factory(backend, video_id="aaaaaaaaaaa", **kwargs):
        def on_ended():
            events["ended"] += 1

        adapter = EmbeddedPlayerAdapter(
            backend,
            video_id,
            on_state_change=events["states"].append,
            on_ended=on_ended,
            on_error=events["errors"].append,
            poll_interval=0.01,
            **kwargs,
        )
        created.append(adapter)
        return adapter

    yield factory

    for adapter in created:
        await adapter.destroy()


async def ready(adapter):
    adapter.start()
    assert await adapter.wait_ready()
    await adapter.wait_idle()
    return adapter


class TestCommandQueue:
    async def test_commands_before_ready_wait_in_order(self, make_adapter):
        backend = FakePlayerBackend(ready_on_create=False)
        adapter = make_adapter(backend)
        adapter.start()

        adapter.seek(30)
        adapter.play()
        await asyncio.sleep(0.01)
        assert backend.commands() == []

        backend.emit_ready()
        await adapter.wait_idle()

        assert backend.commands() == [("seek_to", 30.0), ("play_video",)]

    async def test_controls_before_start_do_not_raise(self, make_adapter, backend):
        adapter = make_adapter(backend)

        adapter.control.play()
        adapter.control.toggle_mute()
        adapter.control.seek(-5)
        await ready(adapter)

        assert backend.commands() == [("play_video",), ("mute",), ("seek_to", 0.0)]

    async def test_state_follows_backend_events_only(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))

        adapter.play()
        await adapter.wait_idle()
        assert adapter.state == PlayerState.UNSTARTED
        assert adapter.wants_play is True

        backend.emit_state(PlayerState.PLAYING)
        assert adapter.state == PlayerState.PLAYING

        adapter.pause()
        await adapter.wait_idle()
        assert adapter.state == PlayerState.PLAYING

        await adapter.destroy()

    async def test_autoplay_queues_play(self, make_adapter, backend):
        adapter = make_adapter(backend, autoplay=True)

        await ready(adapter)

        assert backend.commands() == [("play_video",)]

    async def test_failed_command_is_swallowed(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))
        backend.failing.add("play_video")

        adapter.play()
        adapter.pause()
        await adapter.wait_idle()

        assert backend.commands() == [("play_video",), ("pause_video",)]
        assert adapter.errored is False


class TestStopAndCancel:
    async def test_stop_rewinds_and_pauses(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))

        adapter.stop()
        await adapter.wait_idle()

        assert backend.commands() == [("seek_to", 0), ("pause_video",)]
        assert adapter.current_time == 0.0

    async def test_cancel_stops_player(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))

        adapter.cancel()
        await adapter.wait_idle()

        assert backend.commands() == [("stop_video",)]

    async def test_repeated_stop_and_cancel(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))

        adapter.stop()
        adapter.stop()
        adapter.cancel()
        adapter.cancel()
        await adapter.wait_idle()

        assert backend.commands().count(("stop_video",)) == 2
        assert adapter.errored is False


class TestEnded:
    async def test_ended_reported_once(self, make_adapter, backend, events):
        adapter = await ready(make_adapter(backend))

        backend.emit_state(PlayerState.PLAYING)
        backend.emit_state(PlayerState.ENDED)
        backend.emit_state(PlayerState.ENDED)

        assert events["ended"] == 1
        assert events["states"] == [PlayerState.PLAYING, PlayerState.ENDED, PlayerState.ENDED]
        await adapter.destroy()

    async def test_replay_reports_ended_again(self, make_adapter, backend, events):
        adapter = await ready(make_adapter(backend))

        for _ in range(2):
            backend.emit_state(PlayerState.PLAYING)
            backend.emit_state(PlayerState.ENDED)

        assert events["ended"] == 2
        await adapter.destroy()

    async def test_unknown_state_is_ignored(self, make_adapter, backend, events):
        adapter = await ready(make_adapter(backend))

        backend.emit_state(42)

        assert adapter.state == PlayerState.UNSTARTED
        assert events["states"] == []

    async def test_failing_callback_does_not_break_adapter(self, backend):
        def explode():
            raise RuntimeError("listener bug")

        adapter = EmbeddedPlayerAdapter(backend, "aaaaaaaaaaa", on_ended=explode)
        await ready(adapter)

        backend.emit_state(PlayerState.PLAYING)
        backend.emit_state(PlayerState.ENDED)

        assert adapter.state == PlayerState.ENDED
        await adapter.destroy()


    async def test_end_without_playback_is_not_reported(self, make_adapter, backend, events):
        adapter = await ready(make_adapter(backend))

        backend.emit_state(PlayerState.ENDED)

        assert adapter.state == PlayerState.ENDED
        assert events["ended"] == 0

    async def test_end_of_outgoing_video_is_ignored(self, make_adapter, backend, events):
        adapter = await ready(make_adapter(backend))
        adapter.play()
        backend.emit_state(PlayerState.PLAYING)

        adapter.set_video("bbbbbbbbbbb")
        backend.emit_state(PlayerState.ENDED)
        assert events["ended"] == 0

        await adapter.wait_idle()
        backend.emit_state(PlayerState.ENDED)
        assert events["ended"] == 0

        backend.emit_state(PlayerState.PLAYING)
        backend.emit_state(PlayerState.ENDED)
        assert events["ended"] == 1
        assert adapter.video_id == "bbbbbbbbbbb"

    async def test_end_of_outgoing_video_keeps_new_resume_position(self, make_adapter, backend):
        positions = {"bbbbbbbbbbb": 12.0}
        adapter = await ready(make_adapter(backend, positions=positions))
        backend.emit_state(PlayerState.PLAYING)

        adapter.set_video("bbbbbbbbbbb")
        backend.emit_state(PlayerState.ENDED)

        assert positions["bbbbbbbbbbb"] == 12.0
        assert adapter.current_time == 12.0


class TestSetVideo:
    async def test_cue_when_paused(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))

        adapter.set_video("bbbbbbbbbbb")
        await adapter.wait_idle()

        assert backend.commands() == [("cue_video_by_id", "bbbbbbbbbbb", 0.0)]

    async def test_load_when_playing(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))
        adapter.play()

        adapter.set_video("bbbbbbbbbbb")
        await adapter.wait_idle()

        assert backend.commands() == [("play_video",), ("load_video_by_id", "bbbbbbbbbbb", 0.0)]

    async def test_mute_survives_video_change(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))
        adapter.toggle_mute()

        adapter.set_video("bbbbbbbbbbb")
        await adapter.wait_idle()

        assert adapter.is_muted is True
        assert backend.commands() == [("mute",), ("cue_video_by_id", "bbbbbbbbbbb", 0.0), ("mute",)]

    async def test_same_video_is_noop(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))

        adapter.set_video("aaaaaaaaaaa")
        await adapter.wait_idle()

        assert backend.commands() == []

    async def test_superseded_load_is_skipped(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))

        adapter.set_video("bbbbbbbbbbb")
        adapter.set_video("ccccccccccc")
        await adapter.wait_idle()

        assert backend.commands() == [("cue_video_by_id", "ccccccccccc", 0.0)]


class TestPositions:
    async def test_resume_position_seeks_after_ready(self, make_adapter, backend):
        adapter = make_adapter(backend, positions={"aaaaaaaaaaa": 42.0})

        await ready(adapter)

        assert adapter.current_time == 42.0
        assert backend.commands() == [("seek_to", 42.0)]

    async def test_position_kept_when_switching_videos(self, make_adapter):
        backend = FakePlayerBackend(current_time=37.5)
        positions = {}
        adapter = await ready(make_adapter(backend, positions=positions))
        adapter.play()

        backend.emit_state(PlayerState.PLAYING)
        await asyncio.sleep(0.03)
        adapter.set_video("bbbbbbbbbbb")
        adapter.set_video("aaaaaaaaaaa")
        await adapter.wait_idle()

        assert positions["aaaaaaaaaaa"] == 37.5
        assert backend.commands()[-1] == ("load_video_by_id", "aaaaaaaaaaa", 37.5)
        await adapter.destroy()

    async def test_ended_video_restarts_from_beginning(self, make_adapter):
        backend = FakePlayerBackend(current_time=199.0)
        positions = {}
        adapter = await ready(make_adapter(backend, positions=positions))

        backend.emit_state(PlayerState.PLAYING)
        await asyncio.sleep(0.03)
        backend.emit_state(PlayerState.ENDED)

        assert "aaaaaaaaaaa" not in positions
        assert adapter.current_time == 0.0


class TestErrors:
    async def test_error_drops_commands_until_new_video(self, make_adapter, backend, events):
        adapter = await ready(make_adapter(backend))

        backend.emit_error(150)
        backend.emit_error(150)
        adapter.play()
        adapter.seek(10)
        await adapter.wait_idle()

        assert events["errors"] == [150]
        assert adapter.errored is True
        assert backend.commands() == []

        adapter.set_video("bbbbbbbbbbb")
        adapter.play()
        await adapter.wait_idle()

        assert adapter.errored is False
        assert adapter.last_error is None
        assert backend.commands() == [("load_video_by_id", "bbbbbbbbbbb", 0.0), ("play_video",)]

    async def test_same_video_retry_after_error(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))
        backend.emit_error(5)

        adapter.set_video("aaaaaaaaaaa")
        await adapter.wait_idle()

        assert adapter.errored is False
        assert backend.commands() == [("cue_video_by_id", "aaaaaaaaaaa", 0.0)]

    async def test_init_failure_is_terminal(self, make_adapter, events):
        backend = FakePlayerBackend(fail_create=True)
        adapter = make_adapter(backend, autoplay=True)
        adapter.start()

        assert await adapter.wait_ready() is False
        assert adapter.failed is True
        [error] = events["errors"]
        assert isinstance(error, PlayerInitError)
        assert isinstance(error.__cause__, RuntimeError)
        assert adapter.last_error is error

        adapter.play()
        adapter.set_video("bbbbbbbbbbb")
        adapter.toggle_mute()
        await adapter.destroy()

        assert backend.commands() == []
        assert adapter.is_muted is False
        assert backend.destroyed is False


class TestDestroy:
    async def test_destroy_stops_polling_and_releases_backend(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))
        backend.emit_state(PlayerState.PLAYING)
        poller = adapter._poller

        await adapter.destroy()
        await asyncio.sleep(0)

        assert backend.destroyed is True
        assert poller.cancelled() or poller.done()
        assert adapter._poller is None

    async def test_destroy_before_ready_discards_queued_commands(self, make_adapter):
        backend = FakePlayerBackend(ready_on_create=False)
        adapter = make_adapter(backend)
        adapter.start()
        adapter.play()
        await asyncio.sleep(0.01)

        await adapter.destroy()
        adapter.play()

        assert backend.commands() == []
        assert backend.destroyed is True

    async def test_events_after_destroy_are_ignored(self, make_adapter, backend, events):
        adapter = await ready(make_adapter(backend))
        await adapter.destroy()

        backend.emit_state(PlayerState.PLAYING)
        backend.emit_error(100)

        assert events["states"] == []
        assert events["errors"] == []

    async def test_destroy_twice(self, make_adapter, backend):
        adapter = await ready(make_adapter(backend))

        await adapter.destroy()
        await adapter.destroy()

        assert backend.calls.count(("destroy",)) == 1
