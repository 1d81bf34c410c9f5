# ============================================================================
# FILE: myoozik/db/models/playlist.py
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from myoozik.db.base import Base

class Playlist(Base):
    """A YouTube playlist shared on myoozik"""
    __tablename__ = "playlists"

    id = Column(Integer, primary_key=True, index=True)
    youtube_playlist_id = Column(String, unique=True, index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    songs = relationship(
        "Song", back_populates="playlist", cascade="all, delete-orphan", order_by="Song.id"
    )
    ratings = relationship("PlaylistRating", back_populates="playlist", cascade="all, delete-orphan")
    comments = relationship("PlaylistComment", back_populates="playlist", cascade="all, delete-orphan")

class Song(Base):
    """A video of a playlist; ordering within a playlist is by id (insertion order)"""
    __tablename__ = "songs"

    id = Column(Integer, primary_key=True, index=True)
    playlist_id = Column(Integer, ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True)
    youtube_video_id = Column(String, nullable=False)  # YouTube video ID
    title = Column(String, nullable=False)
    artist = Column(String, nullable=True)
    thumbnail_url = Column(String, nullable=True)
    duration = Column(String, nullable=True)  # "M:SS" or "H:MM:SS"
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    playlist = relationship("Playlist", back_populates="songs")
