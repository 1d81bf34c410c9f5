# ============================================================================
# FILE: myoozik/schemas/youtube.py
# ============================================================================
from pydantic import BaseModel
from typing import Optional, List

class YouTubeVideo(BaseModel):
    """Normalized video metadata from the YouTube Data API"""
    id: str
    title: str
    artist: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: str

class YouTubePlaylist(BaseModel):
    """Normalized playlist metadata with its ordered videos"""
    id: str
    title: str
    description: Optional[str] = None
    videos: List[YouTubeVideo] = []
