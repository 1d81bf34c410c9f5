# ============================================================================
# FILE: myoozik/db/models/rating.py
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from myoozik.db.base import Base

ONE_RATING_PER_IP = "uq_playlist_ratings_playlist_ip"

class PlaylistRating(Base):
    """One 1-5 rating per (playlist, IP address)"""
    __tablename__ = "playlist_ratings"
    __table_args__ = (
        UniqueConstraint("playlist_id", "ip_address", name=ONE_RATING_PER_IP),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_playlist_ratings_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    playlist_id = Column(Integer, ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    ip_address = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    playlist = relationship("Playlist", back_populates="ratings")
