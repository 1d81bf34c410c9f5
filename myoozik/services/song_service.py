# ============================================================================
# FILE: myoozik/services/song_service.py
# ============================================================================
from typing import Optional
from sqlalchemy.orm import Session
from myoozik.db.models.playlist import Song
from myoozik.schemas.song import SongUpdate
import logging

logger = logging.getLogger(__name__)

class SongService:
    """Service layer for editing and removing songs"""

    def get_song(self, db: Session, song_id: int) -> Optional[Song]:
        return db.query(Song).filter(Song.id == song_id).first()

    def update_song(self, db: Session, song_id: int, update_data: SongUpdate) -> Optional[Song]:
        """Update song title/artist"""
        song = self.get_song(db, song_id)
        if not song:
            return None

        try:
            if update_data.title is not None:
                song.title = update_data.title
            if update_data.artist is not None:
                song.artist = update_data.artist or None

            db.commit()
            db.refresh(song)
            logger.info(f"Song updated: {song_id}")
            return song
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating song: {e}")
            raise

    def delete_song(self, db: Session, song_id: int) -> bool:
        """Remove a song from its playlist"""
        song = self.get_song(db, song_id)
        if not song:
            return False

        try:
            db.delete(song)
            db.commit()
            logger.info(f"Song deleted: {song_id}")
            return True
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting song: {e}")
            raise

# Create singleton instance
song_service = SongService()
