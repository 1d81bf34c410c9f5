# ============================================================================
# FILE: myoozik/services/comment_service.py
# ============================================================================
from typing import List, Optional
from sqlalchemy.orm import Session
from myoozik.db.models.playlist import Playlist
from myoozik.db.models.comment import PlaylistComment
from myoozik.schemas.comment import CommentCreate
from myoozik.core.exceptions import PlaylistNotFoundError
import logging

logger = logging.getLogger(__name__)

class CommentService:
    """Service layer for playlist comments"""

    def list_comments(self, db: Session, playlist_id: int) -> List[PlaylistComment]:
        """Comments of a playlist, newest first"""
        return db.query(PlaylistComment).filter(
            PlaylistComment.playlist_id == playlist_id
        ).order_by(PlaylistComment.created_at.desc(), PlaylistComment.id.desc()).all()

    def create_comment(self, db: Session, playlist_id: int, comment_data: CommentCreate) -> PlaylistComment:
        """Append a comment (content and nickname already normalized by the schema)"""
        if not db.query(Playlist.id).filter(Playlist.id == playlist_id).first():
            raise PlaylistNotFoundError(f"Playlist not found: {playlist_id}")

        try:
            comment = PlaylistComment(
                playlist_id=playlist_id,
                content=comment_data.content,
                nickname=comment_data.nickname,
            )
            db.add(comment)
            db.commit()
            db.refresh(comment)
            logger.info(f"Comment {comment.id} added to playlist {playlist_id}")
            return comment
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating comment: {e}")
            raise

    def get_comment(self, db: Session, comment_id: int) -> Optional[PlaylistComment]:
        return db.query(PlaylistComment).filter(PlaylistComment.id == comment_id).first()

    def update_comment(self, db: Session, comment_id: int, content: str) -> Optional[PlaylistComment]:
        comment = self.get_comment(db, comment_id)
        if not comment:
            return None

        try:
            comment.content = content
            db.commit()
            db.refresh(comment)
            logger.info(f"Comment updated: {comment_id}")
            return comment
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating comment: {e}")
            raise

    def delete_comment(self, db: Session, comment_id: int) -> bool:
        comment = self.get_comment(db, comment_id)
        if not comment:
            return False

        try:
            db.delete(comment)
            db.commit()
            logger.info(f"Comment deleted: {comment_id}")
            return True
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting comment: {e}")
            raise

# Create singleton instance
comment_service = CommentService()
