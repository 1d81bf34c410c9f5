"""
Pytest configuration and fixtures for myoozik tests.
"""

import asyncio
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from myoozik.core.exceptions import ApiError, DuplicateRatingError
from myoozik.db.base import Base, import_models
from myoozik.db.models.playlist import Playlist, Song
from myoozik.db.session import enable_sqlite_foreign_keys, get_db
from myoozik.main import app
from myoozik.schemas.comment import CommentResponse
from myoozik.schemas.playlist import PlaylistResponse, PlaylistSummary
from myoozik.schemas.rating import RatingResponse
from myoozik.schemas.song import SongResponse
from myoozik.services.playlist_service import playlist_service


# ============================================================================
# Server fixtures
# ============================================================================

@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test"""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    import_models()
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_youtube(monkeypatch):
    """YouTube ingestion client returning one two-song playlist"""
    youtube = MagicMock()
    youtube.get_playlist_metadata.return_value = {
        "id": "PLtest123",
        "title": "Road Trip",
        "description": "Songs for the road",
        "videos": [
            {"id": "aaaaaaaaaaa", "title": "Artist A - First", "artist": "Artist A",
             "thumbnail_url": "https://i.ytimg.com/vi/aaaaaaaaaaa/hqdefault.jpg", "duration": "2:00"},
            {"id": "bbbbbbbbbbb", "title": "Second", "artist": None,
             "thumbnail_url": "https://i.ytimg.com/vi/bbbbbbbbbbb/hqdefault.jpg", "duration": "3:30"},
        ],
    }
    monkeypatch.setattr(playlist_service, "youtube", youtube)
    return youtube


@pytest.fixture
def client(db):
    """TestClient whose requests all use the test session"""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def playlist(db):
    """A stored playlist with songs A (2:00) and B (3:30)"""
    entry = Playlist(youtube_playlist_id="PLstored", title="Stored", description=None)
    db.add(entry)
    db.flush()
    db.add_all([
        Song(playlist_id=entry.id, youtube_video_id="aaaaaaaaaaa", title="A",
             thumbnail_url="https://img/a.jpg", duration="2:00"),
        Song(playlist_id=entry.id, youtube_video_id="bbbbbbbbbbb", title="B",
             thumbnail_url="https://img/b.jpg", duration="3:30"),
    ])
    db.commit()
    db.refresh(entry)
    return entry


# ============================================================================
# Client fixtures
# ============================================================================

def make_song(song_id: int, video_id: str, duration: str = "3:00") -> SongResponse:
    return SongResponse(id=song_id, youtube_video_id=video_id, title=f"Song {song_id}", duration=duration)


class FakeApi:
    """
    In-memory stand-in for MyoozikApiClient.

    `delays` holds per-playlist sleep times for the reads in DELAYED so tests
    can make an earlier request resolve after a later one. `fail` names
    methods that raise ApiError and `fail_playlists` playlists whose
    detail fetches raise.
    """

    DELAYED = ("get_playlist", "get_songs", "get_ratings", "has_rated", "get_comments")

    def __init__(self):
        self.playlists = {}
        self.songs = {}
        self.ratings = {}
        self.comments = {}
        self.delays = {}
        self.fail = set()
        self.fail_playlists = set()
        self.calls = []
        self._next_id = 1
        self._clock = datetime(2024, 1, 1, 12, 0, 0)

    def add_playlist(self, playlist_id: int, songs=(), ratings=()):
        self.playlists[playlist_id] = PlaylistResponse(
            id=playlist_id, youtube_playlist_id=f"PL{playlist_id}", title=f"Playlist {playlist_id}"
        )
        self.songs[playlist_id] = list(songs)
        self.ratings[playlist_id] = {f"10.0.0.{i}": value for i, value in enumerate(ratings)}
        self.comments[playlist_id] = []

    async def _enter(self, name, playlist_id=None):
        self.calls.append((name, playlist_id))
        delay = self.delays.get(playlist_id, 0)
        if delay and name in self.DELAYED:
            await asyncio.sleep(delay)
        else:
            await asyncio.sleep(0)
        if name in self.fail:
            raise ApiError(f"{name} failed", status_code=500)
        if playlist_id in self.fail_playlists and name in ("get_playlist", "get_songs", "get_ratings"):
            raise ApiError(f"{name} failed for {playlist_id}", status_code=500)

    async def list_playlists(self):
        await self._enter("list_playlists")
        return [
            PlaylistSummary(
                id=p.id, youtube_playlist_id=p.youtube_playlist_id, title=p.title,
                song_count=len(self.songs[p.id]),
            )
            for p in self.playlists.values()
        ]

    async def get_playlist(self, playlist_id):
        await self._enter("get_playlist", playlist_id)
        if playlist_id not in self.playlists:
            raise ApiError("not found", status_code=404)
        return self.playlists[playlist_id]

    async def get_songs(self, playlist_id):
        await self._enter("get_songs", playlist_id)
        return list(self.songs.get(playlist_id, []))

    async def get_ratings(self, playlist_id):
        await self._enter("get_ratings", playlist_id)
        return [
            RatingResponse(id=i + 1, playlist_id=playlist_id, rating=value)
            for i, value in enumerate(self.ratings.get(playlist_id, {}).values())
        ]

    async def has_rated(self, playlist_id, ip="127.0.0.1"):
        await self._enter("has_rated", playlist_id)
        return ip in self.ratings.get(playlist_id, {})

    async def submit_rating(self, playlist_id, rating, ip="127.0.0.1"):
        await self._enter("submit_rating", playlist_id)
        stored = self.ratings.setdefault(playlist_id, {})
        if ip in stored:
            raise DuplicateRatingError(playlist_id)
        stored[ip] = rating
        return RatingResponse(id=len(stored), playlist_id=playlist_id, rating=rating)

    async def get_comments(self, playlist_id):
        await self._enter("get_comments", playlist_id)
        return list(self.comments.get(playlist_id, []))

    async def create_comment(self, playlist_id, content, nickname):
        await self._enter("create_comment", playlist_id)
        self._clock += timedelta(minutes=1)
        comment = CommentResponse(id=self._next_id, content=content, nickname=nickname, created_at=self._clock)
        self._next_id += 1
        self.comments.setdefault(playlist_id, []).append(comment)
        return comment


@pytest.fixture
def api():
    fake = FakeApi()
    fake.add_playlist(1, songs=[make_song(1, "aaaaaaaaaaa", "2:00"), make_song(2, "bbbbbbbbbbb", "3:30")])
    fake.add_playlist(2, songs=[make_song(3, "ccccccccccc")], ratings=[3, 4, 5])
    fake.add_playlist(5, songs=[make_song(4, "ddddddddddd"), make_song(5, "eeeeeeeeeee"), make_song(6, "fffffffffff")])
    return fake


class FakePlayerBackend:
    """
    Scripted embedded player. Records every call; events are emitted by the
    test through `emit_*` so ordering is explicit.
    """

    def __init__(self, ready_on_create=True, fail_create=False, current_time=0.0, duration=200.0):
        self.ready_on_create = ready_on_create
        self.fail_create = fail_create
        self.current_time = current_time
        self.duration = duration
        self.failing = set()
        self.calls = []
        self.events = None
        self.destroyed = False

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name in self.failing:
            raise RuntimeError(f"{name} rejected")

    async def create(self, video_id, events):
        self._record("create", video_id)
        await asyncio.sleep(0)
        if self.fail_create:
            raise RuntimeError("iframe api unreachable")
        self.events = events
        if self.ready_on_create:
            events.on_ready()

    async def load_video_by_id(self, video_id, start_seconds=0):
        self._record("load_video_by_id", video_id, start_seconds)

    async def cue_video_by_id(self, video_id, start_seconds=0):
        self._record("cue_video_by_id", video_id, start_seconds)

    async def play_video(self):
        self._record("play_video")

    async def pause_video(self):
        self._record("pause_video")

    async def stop_video(self):
        self._record("stop_video")

    async def seek_to(self, seconds):
        self._record("seek_to", seconds)

    async def mute(self):
        self._record("mute")

    async def un_mute(self):
        self._record("un_mute")

    async def get_current_time(self):
        return self.current_time

    async def get_duration(self):
        return self.duration

    async def destroy(self):
        self._record("destroy")
        self.destroyed = True

    def emit_ready(self):
        self.events.on_ready()

    def emit_state(self, state):
        self.events.on_state_change(int(state))

    def emit_error(self, code):
        self.events.on_error(code)

    def commands(self):
        """Calls after creation, without the create/destroy bookkeeping"""
        return [call for call in self.calls if call[0] not in ("create", "destroy")]
