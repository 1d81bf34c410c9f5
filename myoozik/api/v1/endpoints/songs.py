# ============================================================================
# FILE: myoozik/api/v1/endpoints/songs.py
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from myoozik.db.session import get_db
from myoozik.schemas.song import SongUpdate, SongResponse
from myoozik.services.song_service import song_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.patch("/{song_id}", response_model=SongResponse)
async def update_song(
    song_id: int,
    update_data: SongUpdate,
    db: Session = Depends(get_db)
):
    """Edit song title/artist"""
    try:
        song = song_service.update_song(db, song_id, update_data)
    except Exception as e:
        logger.error(f"Update song error: {e}")
        raise HTTPException(status_code=500, detail="Failed to update song")
    if not song:
        raise HTTPException(status_code=404, detail="Song not found")
    return song

@router.delete("/{song_id}")
async def delete_song(song_id: int, db: Session = Depends(get_db)):
    """Remove a song from its playlist"""
    try:
        success = song_service.delete_song(db, song_id)
    except Exception as e:
        logger.error(f"Delete song error: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete song")
    if not success:
        raise HTTPException(status_code=404, detail="Song not found")
    return {"success": True}
