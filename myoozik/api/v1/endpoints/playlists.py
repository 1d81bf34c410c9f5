# ============================================================================
# FILE: myoozik/api/v1/endpoints/playlists.py
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List
from myoozik.db.session import get_db
from myoozik.schemas.playlist import (
    PlaylistCreate,
    PlaylistUpdate,
    PlaylistResponse,
    PlaylistSummary,
    PlaylistAddResult,
)
from myoozik.schemas.song import SongResponse
from myoozik.schemas.rating import RatingResponse
from myoozik.schemas.comment import CommentCreate, CommentResponse
from myoozik.services.playlist_service import playlist_service
from myoozik.services.comment_service import comment_service
from myoozik.core.exceptions import InvalidPlaylistUrlError, PlaylistNotFoundError, YouTubeApiError
from myoozik.db.models.rating import PlaylistRating
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

def _require_playlist(db: Session, playlist_id: int):
    playlist = playlist_service.get_playlist(db, playlist_id)
    if not playlist:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return playlist

@router.get("", response_model=List[PlaylistSummary])
async def list_playlists(db: Session = Depends(get_db)):
    """
    All playlists with card data (thumbnail, song count, average rating)
    """
    return playlist_service.list_summaries(db)

@router.post("", response_model=PlaylistAddResult)
async def add_playlist(
    playlist_data: PlaylistCreate,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Add a YouTube playlist by URL.
    Returns the existing playlist (200) if it was already added,
    otherwise ingests it from the YouTube Data API (201).
    """
    try:
        playlist, created = playlist_service.add_playlist_from_url(db, playlist_data.url)
    except InvalidPlaylistUrlError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except PlaylistNotFoundError:
        raise HTTPException(status_code=404, detail="Playlist not found on YouTube")
    except YouTubeApiError as e:
        logger.error(f"Add playlist error: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch playlist data")
    except Exception as e:
        logger.error(f"Add playlist error: {e}")
        raise HTTPException(status_code=500, detail="Failed to add playlist")

    if created:
        response.status_code = status.HTTP_201_CREATED
    return {
        "playlist": playlist,
        "created": created,
        "songs": playlist_service.get_songs(db, playlist.id),
    }

@router.get("/{playlist_id}", response_model=PlaylistResponse)
async def get_playlist(playlist_id: int, db: Session = Depends(get_db)):
    """Get a playlist row"""
    return _require_playlist(db, playlist_id)

@router.patch("/{playlist_id}", response_model=PlaylistResponse)
async def update_playlist(
    playlist_id: int,
    update_data: PlaylistUpdate,
    db: Session = Depends(get_db)
):
    """Update playlist title/description"""
    try:
        playlist = playlist_service.update_playlist(db, playlist_id, update_data)
    except Exception as e:
        logger.error(f"Update playlist error: {e}")
        raise HTTPException(status_code=500, detail="Failed to update playlist")
    if not playlist:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return playlist

@router.delete("/{playlist_id}")
async def delete_playlist(playlist_id: int, db: Session = Depends(get_db)):
    """Delete a playlist with its songs, ratings and comments"""
    try:
        success = playlist_service.delete_playlist(db, playlist_id)
    except Exception as e:
        logger.error(f"Delete playlist error: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete playlist")
    if not success:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return {"success": True}

@router.get("/{playlist_id}/songs", response_model=List[SongResponse])
async def get_playlist_songs(playlist_id: int, db: Session = Depends(get_db)):
    """Songs of a playlist in insertion order"""
    _require_playlist(db, playlist_id)
    return playlist_service.get_songs(db, playlist_id)

@router.get("/{playlist_id}/ratings", response_model=List[RatingResponse])
async def get_playlist_ratings(playlist_id: int, db: Session = Depends(get_db)):
    """Rating values of a playlist (addresses are not exposed)"""
    _require_playlist(db, playlist_id)
    return db.query(PlaylistRating).filter(
        PlaylistRating.playlist_id == playlist_id
    ).order_by(PlaylistRating.id.asc()).all()

@router.get("/{playlist_id}/comments", response_model=List[CommentResponse])
async def get_playlist_comments(playlist_id: int, db: Session = Depends(get_db)):
    """Comments of a playlist, newest first"""
    _require_playlist(db, playlist_id)
    return comment_service.list_comments(db, playlist_id)

@router.post("/{playlist_id}/comments", response_model=CommentResponse, status_code=201)
async def create_playlist_comment(
    playlist_id: int,
    comment_data: CommentCreate,
    db: Session = Depends(get_db)
):
    """Post an anonymous comment (blank nickname becomes "Anonymous")"""
    try:
        return comment_service.create_comment(db, playlist_id, comment_data)
    except PlaylistNotFoundError:
        raise HTTPException(status_code=404, detail="Playlist not found")
    except Exception as e:
        logger.error(f"Create comment error: {e}")
        raise HTTPException(status_code=500, detail="Failed to post comment")
