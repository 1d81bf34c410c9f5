# ============================================================================
# FILE: myoozik/services/playlist_service.py
# ============================================================================
from typing import List, Optional, Tuple
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from myoozik.db.models.playlist import Playlist, Song
from myoozik.db.models.rating import PlaylistRating
from myoozik.schemas.playlist import PlaylistUpdate, PlaylistSummary
from myoozik.core.youtube_client import youtube_client as default_youtube_client, extract_playlist_id
from myoozik.core.exceptions import InvalidPlaylistUrlError, PlaylistNotFoundError
from myoozik.core.ratings import average_rating
import logging

logger = logging.getLogger(__name__)

class PlaylistService:
    """Service layer for playlist operations"""

    def __init__(self, youtube=None):
        self.youtube = youtube or default_youtube_client

    def get_playlist(self, db: Session, playlist_id: int) -> Optional[Playlist]:
        """Get a playlist row"""
        return db.query(Playlist).filter(Playlist.id == playlist_id).first()

    def get_playlist_by_youtube_id(self, db: Session, youtube_playlist_id: str) -> Optional[Playlist]:
        return db.query(Playlist).filter(Playlist.youtube_playlist_id == youtube_playlist_id).first()

    def get_songs(self, db: Session, playlist_id: int) -> List[Song]:
        """Songs in insertion order"""
        return db.query(Song).filter(Song.playlist_id == playlist_id).order_by(Song.id.asc()).all()

    def get_rating_values(self, db: Session, playlist_id: int) -> List[int]:
        rows = db.query(PlaylistRating.rating).filter(PlaylistRating.playlist_id == playlist_id).all()
        return [row.rating for row in rows]

    def list_summaries(self, db: Session) -> List[PlaylistSummary]:
        """
        Every playlist with its card data: first song thumbnail, song count,
        average rating and rating count
        """
        song_counts = dict(
            db.query(Song.playlist_id, func.count(Song.id)).group_by(Song.playlist_id).all()
        )
        first_song_ids = select(func.min(Song.id)).group_by(Song.playlist_id)
        thumbnails = dict(
            db.query(Song.playlist_id, Song.thumbnail_url).filter(Song.id.in_(first_song_ids)).all()
        )
        ratings = {}
        for playlist_id, value in db.query(PlaylistRating.playlist_id, PlaylistRating.rating).all():
            ratings.setdefault(playlist_id, []).append(value)

        summaries = []
        for playlist in db.query(Playlist).order_by(Playlist.id.asc()).all():
            values = ratings.get(playlist.id, [])
            summaries.append(PlaylistSummary(
                id=playlist.id,
                youtube_playlist_id=playlist.youtube_playlist_id,
                title=playlist.title,
                description=playlist.description,
                thumbnail_url=thumbnails.get(playlist.id),
                song_count=song_counts.get(playlist.id, 0),
                average_rating=average_rating(values),
                total_ratings=len(values),
            ))
        return summaries

    def add_playlist_from_url(self, db: Session, url: str) -> Tuple[Playlist, bool]:
        """
        Add a YouTube playlist by URL.

        Returns (playlist, created). An already added playlist is returned
        as-is without calling YouTube.

        Raises:
            InvalidPlaylistUrlError: URL has no `list=` parameter
            PlaylistNotFoundError: YouTube does not know the playlist
            YouTubeApiError: YouTube API unavailable
        """
        youtube_playlist_id = extract_playlist_id(url)
        if not youtube_playlist_id:
            raise InvalidPlaylistUrlError("Invalid YouTube playlist URL. Please enter a valid URL.")

        existing = self.get_playlist_by_youtube_id(db, youtube_playlist_id)
        if existing:
            logger.info(f"Playlist already added: {youtube_playlist_id} -> {existing.id}")
            return existing, False

        metadata = self.youtube.get_playlist_metadata(youtube_playlist_id)
        if not metadata:
            raise PlaylistNotFoundError(f"YouTube playlist not found: {youtube_playlist_id}")

        try:
            playlist = Playlist(
                youtube_playlist_id=youtube_playlist_id,
                title=metadata["title"],
                description=metadata.get("description") or None,
            )
            db.add(playlist)
            db.flush()

            for video in metadata.get("videos", []):
                db.add(Song(
                    playlist_id=playlist.id,
                    youtube_video_id=video["id"],
                    title=video["title"],
                    artist=video.get("artist"),
                    thumbnail_url=video.get("thumbnail_url"),
                    duration=video.get("duration"),
                ))

            db.commit()
            db.refresh(playlist)
            logger.info(f"Playlist added: {playlist.id} ({youtube_playlist_id}, {len(metadata.get('videos', []))} songs)")
            return playlist, True
        except Exception as e:
            db.rollback()
            logger.error(f"Error adding playlist {youtube_playlist_id}: {e}")
            raise

    def update_playlist(self, db: Session, playlist_id: int, update_data: PlaylistUpdate) -> Optional[Playlist]:
        """Update playlist title/description"""
        playlist = self.get_playlist(db, playlist_id)
        if not playlist:
            return None

        try:
            if update_data.title is not None:
                playlist.title = update_data.title
            if update_data.description is not None:
                playlist.description = update_data.description or None

            db.commit()
            db.refresh(playlist)
            logger.info(f"Playlist updated: {playlist_id}")
            return playlist
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating playlist: {e}")
            raise

    def delete_playlist(self, db: Session, playlist_id: int) -> bool:
        """Delete a playlist with its songs, ratings and comments"""
        playlist = self.get_playlist(db, playlist_id)
        if not playlist:
            return False

        youtube_playlist_id = playlist.youtube_playlist_id
        try:
            db.delete(playlist)
            db.commit()
            self.youtube.forget_playlist(youtube_playlist_id)
            logger.info(f"Playlist deleted: {playlist_id}")
            return True
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting playlist: {e}")
            raise

# Create singleton instance
playlist_service = PlaylistService()
