# ============================================================================
# FILE: myoozik/schemas/rating.py
# ============================================================================
from pydantic import BaseModel, Field
from typing import Optional
from myoozik.core.ratings import MIN_RATING, MAX_RATING

class RatingCreate(BaseModel):
    """Schema for rating a playlist; the submitter is identified by IP"""
    playlist_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING, strict=True)

class RatingUpdate(BaseModel):
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING, strict=True)

class RatingResponse(BaseModel):
    """A stored rating; the IP address is never exposed"""
    id: int
    playlist_id: int
    rating: int

    class Config:
        from_attributes = True

class RatingStatus(BaseModel):
    has_rated: bool

class TopPlaylist(BaseModel):
    """Scoreboard entry"""
    id: int
    title: str
    youtube_playlist_id: str
    average_rating: float
    total_ratings: int
