# ============================================================================
# FILE: myoozik/client/player.py
# Adapter over an asynchronously initializing embedded video player
# ============================================================================
import asyncio
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Optional, Protocol
from myoozik.config import settings
from myoozik.core.exceptions import PlayerInitError

logger = logging.getLogger(__name__)


class PlayerState(IntEnum):
    """Player states as numbered by the YouTube IFrame API"""
    UNSTARTED = -1
    ENDED = 0
    PLAYING = 1
    PAUSED = 2
    BUFFERING = 3
    CUED = 5


@dataclass
class PlayerEvents:
    """Callbacks a backend invokes to report what the embedded player did"""
    on_ready: Callable[[], None]
    on_state_change: Callable[[int], None]
    on_error: Callable[[object], None]


class PlayerBackend(Protocol):
    """
    The embedded player runtime. One backend instance is one player; it is
    owned by exactly one EmbeddedPlayerAdapter.

    `create` loads the runtime and the initial video; it raises when the
    runtime cannot be loaded. Readiness is reported later through
    `events.on_ready`, which may happen before or after `create` returns.
    """

    async def create(self, video_id: str, events: PlayerEvents) -> None: ...
    async def load_video_by_id(self, video_id: str, start_seconds: float = 0) -> None: ...
    async def cue_video_by_id(self, video_id: str, start_seconds: float = 0) -> None: ...
    async def play_video(self) -> None: ...
    async def pause_video(self) -> None: ...
    async def stop_video(self) -> None: ...
    async def seek_to(self, seconds: float) -> None: ...
    async def mute(self) -> None: ...
    async def un_mute(self) -> None: ...
    async def get_current_time(self) -> float: ...
    async def get_duration(self) -> float: ...
    async def destroy(self) -> None: ...


@dataclass(frozen=True)
class PlayerControl:
    """The control surface handed to callers; every call returns immediately"""
    play: Callable[[], None]
    pause: Callable[[], None]
    stop: Callable[[], None]
    cancel: Callable[[], None]
    toggle_mute: Callable[[], None]
    seek: Callable[[float], None]


class EmbeddedPlayerAdapter:
    """
    Synchronous-looking controls over an asynchronous player.

    Commands are queued and executed one at a time, in call order, once the
    backend reports ready; calls made before that wait in the queue. The
    adapter never reports a state the backend has not confirmed: `state`
    only changes on the backend's state-change events.

    "Ended" is reported once per playback, and only for the video the
    backend actually has loaded: while a `set_video` load is still queued,
    events describe the outgoing video and cannot end the new one.

    After a playback error, commands are dropped until `set_video` supplies
    a new video. A failed initialization is terminal for the adapter.
    """

    def __init__(
        self,
        backend: PlayerBackend,
        video_id: str,
        *,
        autoplay: bool = False,
        on_state_change: Optional[Callable[[PlayerState], None]] = None,
        on_ended: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[object], None]] = None,
        positions: Optional[Dict[str, float]] = None,
        poll_interval: Optional[float] = None,
    ):
        self.backend = backend
        self.video_id = video_id
        self.on_state_change = on_state_change
        self.on_ended = on_ended
        self.on_error = on_error
        # Resume positions by video id, scoped to this adapter
        self.positions = positions if positions is not None else {}
        self.poll_interval = poll_interval or settings.PLAYER_POLL_INTERVAL_SECONDS

        self.state = PlayerState.UNSTARTED
        self.is_ready = False
        self.is_muted = False
        self.failed = False
        self.errored = False
        self.last_error: Optional[object] = None
        self.current_time = self.positions.get(video_id, 0.0)
        self.duration = 0.0

        self._wants_play = False
        # "Ended" counts only for a video seen playing since it was loaded
        self._ended_armed = False
        self._pending_loads = 0
        self._destroyed = False
        self._queue: asyncio.Queue = asyncio.Queue()
        self._ready = asyncio.Event()
        self._init_task: Optional[asyncio.Task] = None
        self._worker: Optional[asyncio.Task] = None
        self._poller: Optional[asyncio.Task] = None

        self.control = PlayerControl(
            play=self.play,
            pause=self.pause,
            stop=self.stop,
            cancel=self.cancel,
            toggle_mute=self.toggle_mute,
            seek=self.seek,
        )

        if autoplay:
            self.play()

    @property
    def wants_play(self) -> bool:
        """The caller's last play/pause intent (not the confirmed state)"""
        return self._wants_play

    # Lifecycle

    def start(self):
        """Begin initializing the backend; must be called from the event loop"""
        if self._init_task is not None or self._destroyed:
            return
        loop = asyncio.get_running_loop()
        self._worker = loop.create_task(self._run_commands())
        self._init_task = loop.create_task(self._initialize())

    async def wait_ready(self) -> bool:
        """Wait until the backend is ready or failed; True when ready"""
        if self._init_task is not None:
            await self._init_task
        if not self.failed and not self._destroyed:
            await self._ready.wait()
        return self.is_ready

    async def wait_idle(self):
        """Wait until every queued command has been executed"""
        await self._queue.join()

    async def destroy(self):
        """Release the player: stop polling, cancel pending work, destroy the backend"""
        if self._destroyed:
            return
        self._destroyed = True
        self._stop_polling()
        self._drain_queue()

        tasks = [task for task in (self._worker, self._init_task) if task is not None and not task.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        if self._init_task is not None and not self.failed:
            try:
                await self.backend.destroy()
            except Exception as e:
                logger.warning(f"Player destroy failed: {e}")
        logger.info(f"Player for {self.video_id} destroyed")

    async def _initialize(self):
        events = PlayerEvents(
            on_ready=self._handle_ready,
            on_state_change=self._handle_state_change,
            on_error=self._handle_error,
        )
        try:
            await self.backend.create(self.video_id, events)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Player initialization failed: {e}")
            self.failed = True
            if self._worker is not None:
                self._worker.cancel()
            self._drain_queue()
            error = PlayerInitError(f"Player initialization failed: {e}")
            error.__cause__ = e
            self._report_error(error)

    # Controls

    def play(self):
        self._wants_play = True
        self._enqueue("play")

    def pause(self):
        """Pause and keep the position"""
        self._wants_play = False
        self._enqueue("pause")

    def stop(self):
        """Rewind to the start and pause"""
        self._wants_play = False
        self._enqueue("stop")

    def cancel(self):
        """Rewind and stop the player entirely"""
        self._wants_play = False
        self._enqueue("cancel")

    def toggle_mute(self):
        if self.failed or self._destroyed:
            return
        self.is_muted = not self.is_muted
        self._enqueue("mute" if self.is_muted else "unmute")

    def seek(self, seconds: float):
        self._enqueue("seek", max(0.0, float(seconds)))

    def set_video(self, video_id: str):
        """
        Retarget the same player to another video, keeping the play/pause
        intent and the mute setting. Clears a previous playback error.
        """
        if self.failed or self._destroyed:
            return
        if video_id == self.video_id and not self.errored:
            return

        if self.current_time > 0 and self.state != PlayerState.ENDED:
            self.positions[self.video_id] = self.current_time
        self._stop_polling()

        self.video_id = video_id
        self.errored = False
        self.last_error = None
        self._ended_armed = False
        self.current_time = self.positions.get(video_id, 0.0)
        self._pending_loads += 1
        self._enqueue("load", video_id)

    # Command queue

    def _enqueue(self, name: str, *args):
        if self.failed or self._destroyed:
            logger.debug(f"Player command {name} dropped: player unavailable")
            return
        if self.errored and name != "load":
            logger.debug(f"Player command {name} dropped: player in error state")
            return
        self._queue.put_nowait((name, args))

    def _drain_queue(self):
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()

    async def _run_commands(self):
        await self._ready.wait()
        await self._prepare()
        while True:
            name, args = await self._queue.get()
            try:
                if self.errored and name != "load":
                    continue
                await self._execute(name, *args)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"Player command {name} failed: {e}")
            finally:
                self._queue.task_done()

    async def _prepare(self):
        """First contact after ready: duration, resume position"""
        try:
            self.duration = await self.backend.get_duration()
            resume_at = self.positions.get(self.video_id, 0.0)
            if resume_at > 0:
                await self.backend.seek_to(resume_at)
        except Exception as e:
            logger.warning(f"Player setup after ready failed: {e}")

    async def _execute(self, name: str, *args):
        backend = self.backend
        if name == "play":
            await backend.play_video()
        elif name == "pause":
            await backend.pause_video()
        elif name == "stop":
            self.positions.pop(self.video_id, None)
            self.current_time = 0.0
            await backend.seek_to(0)
            await backend.pause_video()
        elif name == "cancel":
            self.positions.pop(self.video_id, None)
            self.current_time = 0.0
            await backend.stop_video()
        elif name == "mute":
            await backend.mute()
        elif name == "unmute":
            await backend.un_mute()
        elif name == "seek":
            await backend.seek_to(args[0])
            self.current_time = args[0]
        elif name == "load":
            try:
                await self._load(args[0])
            finally:
                self._pending_loads -= 1
                self._ended_armed = False
        else:
            raise ValueError(f"Unknown player command: {name}")

    async def _load(self, video_id: str):
        if video_id != self.video_id:
            # Superseded by a later set_video still in the queue
            return
        start = self.positions.get(video_id, 0.0)
        if self._wants_play:
            await self.backend.load_video_by_id(video_id, start)
        else:
            await self.backend.cue_video_by_id(video_id, start)
        # Players reset transient settings on load
        if self.is_muted:
            await self.backend.mute()
        self.duration = await self.backend.get_duration()

    # Backend events

    def _handle_ready(self):
        if self._destroyed or self.is_ready:
            return
        self.is_ready = True
        self._ready.set()
        logger.info(f"Player ready for {self.video_id}")

    def _handle_state_change(self, state: int):
        if self._destroyed:
            return
        try:
            state = PlayerState(state)
        except ValueError:
            logger.debug(f"Ignoring unknown player state {state}")
            return

        self.state = state
        # Events that arrive while a load is queued belong to the outgoing video
        stale = self._pending_loads > 0
        if state == PlayerState.PLAYING and not stale:
            self._ended_armed = True
            self._start_polling()
        elif state != PlayerState.PLAYING:
            self._stop_polling()

        reports_end = state == PlayerState.ENDED and self._ended_armed and not stale
        if reports_end:
            self._ended_armed = False
            self.positions.pop(self.video_id, None)
            self.current_time = 0.0

        self._notify(self.on_state_change, state)

        if reports_end:
            self._notify(self.on_ended)

    def _handle_error(self, error: object):
        if self._destroyed or self.errored:
            return
        logger.warning(f"Player error for {self.video_id}: {error}")
        self._stop_polling()
        self._report_error(error)

    def _report_error(self, error: object):
        self.errored = True
        self.last_error = error
        self._notify(self.on_error, error)

    def _notify(self, callback, *args):
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Player callback {getattr(callback, '__name__', callback)} failed: {e}")

    # Position polling

    def _start_polling(self):
        if self._poller is None or self._poller.done():
            self._poller = asyncio.get_running_loop().create_task(self._poll_position())

    def _stop_polling(self):
        if self._poller is not None:
            self._poller.cancel()
            self._poller = None

    async def _poll_position(self):
        while True:
            try:
                self.current_time = await self.backend.get_current_time()
                self.positions[self.video_id] = self.current_time
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"Player position poll failed: {e}")
            await asyncio.sleep(self.poll_interval)
