# ============================================================================
# FILE: myoozik/client/session.py
# Playlist page: wires the session store, the interaction store and the player
# ============================================================================
import logging
from typing import Callable, Optional, Union
from myoozik.client.interaction_store import InteractionStore
from myoozik.client.player import EmbeddedPlayerAdapter, PlayerBackend, PlayerState
from myoozik.client.playlist_store import PlaylistSessionStore

logger = logging.getLogger(__name__)


class PlaylistPageSession:
    """
    One viewing session of one playlist page.

    The store's cursor is the single source of truth for which song is
    loaded; the player only follows it. The player's "ended" event is fed
    back to the store, which decides whether to advance.
    """

    def __init__(
        self,
        api,
        backend_factory: Callable[[], PlayerBackend],
        playlist_store: Optional[PlaylistSessionStore] = None,
        interaction_store: Optional[InteractionStore] = None,
    ):
        self.playlist_store = playlist_store or PlaylistSessionStore(api)
        self.interactions = interaction_store or InteractionStore(api)
        self.backend_factory = backend_factory
        self.player: Optional[EmbeddedPlayerAdapter] = None
        self.player_state: Optional[PlayerState] = None
        self.player_error: Optional[object] = None
        self.playlist_id: Optional[Union[int, str]] = None

        self._loaded_index: Optional[int] = None
        self._positions = {}
        # Bumped by open() and close(); an open() that is overtaken stops early
        self._visit = 0
        self._unsubscribe = self.playlist_store.subscribe(self._on_store_change)

    async def open(self, playlist_id: Union[int, str]):
        """Load the playlist, the visitor's rating status and the comments"""
        self._visit += 1
        visit = self._visit
        self.playlist_id = playlist_id
        await self.playlist_store.load_playlist_details(playlist_id)
        playlist = self.playlist_store.current_playlist
        if visit != self._visit or playlist is None or self.playlist_store.error:
            return
        await self.interactions.check_if_rated(playlist.id)
        if visit != self._visit:
            return
        await self.interactions.fetch_comments(playlist.id)

    async def close(self):
        """Leaving the page: release the player and reset both stores"""
        self._visit += 1
        self._unsubscribe()
        if self.player is not None:
            await self.player.destroy()
            self.player = None
        self._loaded_index = None
        self.playlist_store.clear_session()
        self.interactions.reset()

    # Song navigation

    def play_song(self, index: int):
        self.playlist_store.select_song(index)

    def stop_song(self):
        self.playlist_store.stop()

    def next_song(self):
        if self.playlist_store.has_next:
            self.playlist_store.advance()

    def previous_song(self):
        self.playlist_store.retreat()

    # Interactions

    async def rate(self, value: int) -> bool:
        """Rate the open playlist; an accepted rating refreshes the aggregate"""
        playlist = self.playlist_store.current_playlist
        if playlist is None:
            return False
        accepted = await self.interactions.submit_rating(playlist.id, value)
        if accepted:
            await self.playlist_store.refresh()
        return accepted

    async def comment(self, content: str, nickname: str = ""):
        playlist = self.playlist_store.current_playlist
        if playlist is not None:
            await self.interactions.submit_comment(playlist.id, content, nickname)

    # Store -> player

    def _on_store_change(self, store: PlaylistSessionStore):
        index = store.current_song_index
        if index == self._loaded_index:
            return

        previous_index = self._loaded_index
        self._loaded_index = index

        if index is None:
            if self.player is not None:
                self.player.cancel()
            return

        video_id = store.songs[index].youtube_video_id
        if self.player is None:
            self.player = EmbeddedPlayerAdapter(
                self.backend_factory(),
                video_id,
                autoplay=True,
                on_state_change=self._on_player_state,
                on_ended=self._on_player_ended,
                on_error=self._on_player_error,
                positions=self._positions,
            )
            self.player.start()
            return

        self.player_error = None
        self.player.set_video(video_id)
        if previous_index is None:
            # Selecting a song after a stop is a request to play it
            self.player.play()

    # Player -> store

    def _on_player_state(self, state: PlayerState):
        self.player_state = state

    def _on_player_ended(self):
        # The adapter only reports the end of the video it last loaded, which
        # is the song at _loaded_index
        if self._loaded_index is not None:
            self.playlist_store.track_ended(self._loaded_index)

    def _on_player_error(self, error: object):
        logger.warning(f"Playback error: {error}")
        self.player_error = error
