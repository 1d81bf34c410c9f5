# ============================================================================
# FILE: myoozik/services/rating_service.py
# ============================================================================
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from myoozik.db.models.playlist import Playlist
from myoozik.db.models.rating import PlaylistRating, ONE_RATING_PER_IP
from myoozik.schemas.rating import TopPlaylist
from myoozik.core.exceptions import DuplicateRatingError, PlaylistNotFoundError
from myoozik.config import settings
import logging

logger = logging.getLogger(__name__)

# SQLite names the columns, PostgreSQL and others name the constraint
_ONE_PER_IP_MARKERS = (
    ONE_RATING_PER_IP,
    "playlist_ratings.playlist_id, playlist_ratings.ip_address",
)


def _violates_one_per_ip(error: IntegrityError) -> bool:
    message = str(error.orig)
    return any(marker in message for marker in _ONE_PER_IP_MARKERS)

class RatingService:
    """
    Service layer for playlist ratings.

    Identity is the client IP address: one rating per (playlist, IP).
    The unique constraint is the authority; the pre-check only avoids a
    failed insert in the common case.
    """

    def has_rated(self, db: Session, playlist_id: int, ip_address: str) -> bool:
        return db.query(PlaylistRating.id).filter(
            PlaylistRating.playlist_id == playlist_id,
            PlaylistRating.ip_address == ip_address
        ).first() is not None

    def submit_rating(self, db: Session, playlist_id: int, rating: int, ip_address: str) -> PlaylistRating:
        """
        Store a rating for a playlist.

        Raises:
            PlaylistNotFoundError: unknown playlist
            DuplicateRatingError: this IP already rated the playlist
        """
        if not db.query(Playlist.id).filter(Playlist.id == playlist_id).first():
            raise PlaylistNotFoundError(f"Playlist not found: {playlist_id}")

        if self.has_rated(db, playlist_id, ip_address):
            logger.info(f"Duplicate rating rejected for playlist {playlist_id}")
            raise DuplicateRatingError(playlist_id)

        try:
            entry = PlaylistRating(playlist_id=playlist_id, rating=rating, ip_address=ip_address)
            db.add(entry)
            db.commit()
            db.refresh(entry)
            logger.info(f"Rating {rating} stored for playlist {playlist_id}")
            return entry
        except IntegrityError as e:
            db.rollback()
            if not _violates_one_per_ip(e):
                logger.error(f"Error submitting rating: {e}")
                raise
            # Lost the race against a concurrent request from the same IP
            logger.info(f"Duplicate rating rejected by constraint for playlist {playlist_id}")
            raise DuplicateRatingError(playlist_id)
        except Exception as e:
            db.rollback()
            logger.error(f"Error submitting rating: {e}")
            raise

    def top_rated(self, db: Session, limit: Optional[int] = None) -> List[TopPlaylist]:
        """Playlists with at least one rating, best average first"""
        average = func.avg(PlaylistRating.rating).label("average_rating")
        total = func.count(PlaylistRating.id).label("total_ratings")
        rows = (
            db.query(Playlist.id, Playlist.title, Playlist.youtube_playlist_id, average, total)
            .join(PlaylistRating, PlaylistRating.playlist_id == Playlist.id)
            .group_by(Playlist.id, Playlist.title, Playlist.youtube_playlist_id)
            .order_by(average.desc(), total.desc(), Playlist.id.asc())
            .limit(limit or settings.TOP_PLAYLISTS_LIMIT)
            .all()
        )
        return [
            TopPlaylist(
                id=row.id,
                title=row.title,
                youtube_playlist_id=row.youtube_playlist_id,
                average_rating=float(row.average_rating),
                total_ratings=row.total_ratings,
            )
            for row in rows
        ]

    def get_rating(self, db: Session, rating_id: int) -> Optional[PlaylistRating]:
        return db.query(PlaylistRating).filter(PlaylistRating.id == rating_id).first()

    def update_rating(self, db: Session, rating_id: int, rating: int) -> Optional[PlaylistRating]:
        entry = self.get_rating(db, rating_id)
        if not entry:
            return None

        try:
            entry.rating = rating
            db.commit()
            db.refresh(entry)
            logger.info(f"Rating updated: {rating_id}")
            return entry
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating rating: {e}")
            raise

    def delete_rating(self, db: Session, rating_id: int) -> bool:
        entry = self.get_rating(db, rating_id)
        if not entry:
            return False

        try:
            db.delete(entry)
            db.commit()
            logger.info(f"Rating deleted: {rating_id}")
            return True
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting rating: {e}")
            raise

# Create singleton instance
rating_service = RatingService()
