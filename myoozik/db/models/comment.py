# ============================================================================
# FILE: myoozik/db/models/comment.py
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from myoozik.db.base import Base

class PlaylistComment(Base):
    """Anonymous, nicknamed comment on a playlist"""
    __tablename__ = "playlist_comments"

    id = Column(Integer, primary_key=True, index=True)
    playlist_id = Column(Integer, ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    nickname = Column(String(30), nullable=False, default="Anonymous")
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    playlist = relationship("Playlist", back_populates="comments")
