# ============================================================================
# FILE: myoozik/api/v1/endpoints/comments.py
# Comment moderation; posting lives under /playlists/{id}/comments
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from myoozik.db.session import get_db
from myoozik.schemas.comment import CommentUpdate, CommentResponse
from myoozik.services.comment_service import comment_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    update_data: CommentUpdate,
    db: Session = Depends(get_db)
):
    """Edit comment content"""
    try:
        comment = comment_service.update_comment(db, comment_id, update_data.content)
    except Exception as e:
        logger.error(f"Update comment error: {e}")
        raise HTTPException(status_code=500, detail="Failed to update comment")
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment

@router.delete("/{comment_id}")
async def delete_comment(comment_id: int, db: Session = Depends(get_db)):
    """Delete a comment"""
    try:
        success = comment_service.delete_comment(db, comment_id)
    except Exception as e:
        logger.error(f"Delete comment error: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete comment")
    if not success:
        raise HTTPException(status_code=404, detail="Comment not found")
    return {"success": True}
