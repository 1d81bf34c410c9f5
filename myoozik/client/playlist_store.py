# ============================================================================
# FILE: myoozik/client/playlist_store.py
# Playlist session state: loaded playlist, its songs and the playback cursor
# ============================================================================
import asyncio
import logging
import re
from typing import List, Optional, Union
from myoozik.client.store import Store
from myoozik.core.ratings import average_rating
from myoozik.schemas.playlist import PlaylistDetail, PlaylistSummary
from myoozik.schemas.song import SongResponse

logger = logging.getLogger(__name__)

INVALID_ID_ERROR = "Invalid playlist ID"
LOAD_LIST_ERROR = "Failed to fetch playlists"
LOAD_DETAILS_ERROR = "Failed to load playlist"

_DIGITS = re.compile(r"[0-9]+")


def parse_playlist_id(value: Union[int, str, None]) -> Optional[int]:
    """Positive integer id from an int or a decimal string, else None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and _DIGITS.fullmatch(value.strip()):
        number = int(value.strip())
        return number if number > 0 else None
    return None


class PlaylistSessionStore(Store):
    """
    Holds the playlist being viewed and the cursor into its songs.

    The cursor (`current_song_index`) is either None (nothing selected) or a
    valid index into `songs`. Navigation never wraps: advancing past the
    last song clears the cursor, retreating at the first song does nothing.
    """

    def __init__(self, api):
        super().__init__()
        self.api = api
        self.playlists: List[PlaylistSummary] = []
        self.current_playlist: Optional[PlaylistDetail] = None
        self.songs: List[SongResponse] = []
        self.current_song_index: Optional[int] = None
        self.is_loading = False
        self.error: Optional[str] = None

        self._list_request = 0
        self._details_request = 0
        self._last_requested_id = None

    @property
    def current_song(self) -> Optional[SongResponse]:
        if self.current_song_index is None:
            return None
        return self.songs[self.current_song_index]

    @property
    def has_next(self) -> bool:
        return self.current_song_index is not None and self.current_song_index < len(self.songs) - 1

    @property
    def has_previous(self) -> bool:
        return self.current_song_index is not None and self.current_song_index > 0

    async def load_playlist_list(self):
        """Replace the playlist collection with a fresh fetch"""
        self._list_request += 1
        request = self._list_request
        self._set(is_loading=True, error=None)

        try:
            playlists = await self.api.list_playlists()
        except Exception as e:
            logger.error(f"Error fetching playlists: {e}")
            if request == self._list_request:
                self._set(error=LOAD_LIST_ERROR, is_loading=False)
            return

        if request != self._list_request:
            return
        self._set(playlists=list(playlists), is_loading=False)

    async def load_playlist_details(self, playlist_id: Union[int, str]):
        """
        Fetch a playlist row, its songs and its ratings, then replace the
        session state in one step.

        Only the most recent call may apply its result: a response that
        arrives after a newer call was issued is discarded. On failure the
        previous state is kept and `error` is set.
        """
        self._last_requested_id = playlist_id
        self._details_request += 1
        request = self._details_request

        numeric_id = parse_playlist_id(playlist_id)
        if numeric_id is None:
            logger.warning(f"Rejected playlist id: {playlist_id!r}")
            self._set(error=INVALID_ID_ERROR, is_loading=False)
            return

        self._set(is_loading=True, error=None)

        try:
            playlist, songs, ratings = await asyncio.gather(
                self.api.get_playlist(numeric_id),
                self.api.get_songs(numeric_id),
                self.api.get_ratings(numeric_id),
            )
        except Exception as e:
            logger.error(f"Error fetching playlist details for {numeric_id}: {e}")
            if request == self._details_request:
                self._set(error=LOAD_DETAILS_ERROR, is_loading=False)
            return

        if request != self._details_request:
            logger.info(f"Discarding stale response for playlist {numeric_id}")
            return

        values = [entry.rating for entry in ratings]
        detail = PlaylistDetail(
            id=playlist.id,
            youtube_playlist_id=playlist.youtube_playlist_id,
            title=playlist.title,
            description=playlist.description,
            average_rating=average_rating(values),
            total_ratings=len(values),
            song_count=len(songs),
        )

        # Refetching the same playlist keeps the song that is playing
        cursor = self.current_song_index
        same_playlist = self.current_playlist is not None and self.current_playlist.id == detail.id
        if not same_playlist or cursor is None or cursor >= len(songs):
            cursor = None

        self._set(
            current_playlist=detail,
            songs=list(songs),
            current_song_index=cursor,
            is_loading=False,
            error=None,
        )

    async def retry(self):
        """User-triggered retry of the last details load"""
        if self._last_requested_id is not None:
            await self.load_playlist_details(self._last_requested_id)

    async def refresh(self):
        """Refetch the current playlist after a mutation (e.g. a new rating)"""
        if self.current_playlist is not None:
            await self.load_playlist_details(self.current_playlist.id)

    def select_song(self, index: int):
        """Point the cursor at `index`; out-of-range indices are ignored"""
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self.songs):
            logger.debug(f"Ignoring out-of-range song index {index!r} ({len(self.songs)} songs)")
            return
        self._set(current_song_index=index)

    def advance(self):
        """Next song; past the last song the cursor clears (playback finished)"""
        if self.current_song_index is None:
            return
        if self.has_next:
            self._set(current_song_index=self.current_song_index + 1)
        else:
            self._set(current_song_index=None)

    def retreat(self):
        """Previous song; a no-op on the first song"""
        if self.has_previous:
            self._set(current_song_index=self.current_song_index - 1)

    def stop(self):
        if self.current_song_index is not None:
            self._set(current_song_index=None)

    def track_ended(self, index: int):
        """
        Natural end of the song at `index`. If the user already picked
        another song the notification is stale and is dropped.
        """
        if index != self.current_song_index:
            logger.debug(f"Ignoring end of song {index}; cursor is at {self.current_song_index}")
            return
        self.advance()

    def clear_session(self):
        """Back to the empty state; also abandons any in-flight details load"""
        self._details_request += 1
        self._last_requested_id = None
        self._set(
            current_playlist=None,
            songs=[],
            current_song_index=None,
            is_loading=False,
            error=None,
        )
