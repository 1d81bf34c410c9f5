# ============================================================================
# FILE: myoozik/schemas/playlist.py
# ============================================================================
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from myoozik.schemas.song import SongResponse

class PlaylistCreate(BaseModel):
    """Schema for adding a playlist by its YouTube URL"""
    url: str = Field(..., min_length=1)

class PlaylistUpdate(BaseModel):
    """Schema for updating a playlist"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None

class PlaylistResponse(BaseModel):
    """Schema for a playlist row"""
    id: int
    youtube_playlist_id: str
    title: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PlaylistSummary(BaseModel):
    """Playlist card: row plus first song thumbnail, song count and rating stats"""
    id: int
    youtube_playlist_id: str
    title: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    song_count: int = 0
    average_rating: Optional[float] = None
    total_ratings: int = 0

class PlaylistDetail(BaseModel):
    """Playlist as shown on its own page; the aggregate is absent until rated"""
    id: int
    youtube_playlist_id: str
    title: str
    description: Optional[str] = None
    average_rating: Optional[float] = None
    total_ratings: int = 0
    song_count: int = 0

class PlaylistAddResult(BaseModel):
    """Result of adding a playlist: `created` is False when it already existed"""
    playlist: PlaylistResponse
    created: bool
    songs: List[SongResponse] = []
