# ============================================================================
# FILE: myoozik/schemas/song.py
# ============================================================================
from pydantic import BaseModel, Field
from typing import Optional

class SongUpdate(BaseModel):
    """Schema for editing a song"""
    title: Optional[str] = Field(None, min_length=1)
    artist: Optional[str] = None

class SongResponse(BaseModel):
    """Schema for song response"""
    id: int
    youtube_video_id: str
    title: str
    artist: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[str] = None

    class Config:
        from_attributes = True
