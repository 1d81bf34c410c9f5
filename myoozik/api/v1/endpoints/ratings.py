# ============================================================================
# FILE: myoozik/api/v1/endpoints/ratings.py
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List
from myoozik.db.session import get_db
from myoozik.api.dependencies import get_client_ip
from myoozik.schemas.rating import RatingCreate, RatingUpdate, RatingResponse, RatingStatus, TopPlaylist
from myoozik.services.rating_service import rating_service
from myoozik.core.exceptions import DuplicateRatingError, PlaylistNotFoundError
from myoozik.config import settings
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

# Error code the client matches on to reconcile its "already rated" state
ALREADY_RATED = "already_rated"

@router.post("/playlist", response_model=RatingResponse, status_code=201)
async def rate_playlist(
    rating_data: RatingCreate,
    db: Session = Depends(get_db),
    client_ip: str = Depends(get_client_ip)
):
    """
    Rate a playlist (1-5). One rating per playlist per IP address;
    a second submission is rejected with 409, never overwritten.
    """
    try:
        return rating_service.submit_rating(db, rating_data.playlist_id, rating_data.rating, client_ip)
    except DuplicateRatingError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=ALREADY_RATED)
    except PlaylistNotFoundError:
        raise HTTPException(status_code=404, detail="Playlist not found")
    except Exception as e:
        logger.error(f"Submit rating error: {e}")
        raise HTTPException(status_code=500, detail="Failed to submit rating")

@router.get("/playlist/{playlist_id}/status", response_model=RatingStatus)
async def get_rating_status(
    playlist_id: int,
    db: Session = Depends(get_db),
    client_ip: str = Depends(get_client_ip)
):
    """Whether the requesting address already rated the playlist"""
    return {"has_rated": rating_service.has_rated(db, playlist_id, client_ip)}

@router.get("/top", response_model=List[TopPlaylist])
async def get_top_playlists(
    limit: int = Query(settings.TOP_PLAYLISTS_LIMIT, ge=1, le=50, description="Number of playlists"),
    db: Session = Depends(get_db)
):
    """Best rated playlists by average rating"""
    try:
        return rating_service.top_rated(db, limit)
    except Exception as e:
        logger.error(f"Top playlists error: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch top rated playlists")

@router.patch("/{rating_id}", response_model=RatingResponse)
async def update_rating(
    rating_id: int,
    update_data: RatingUpdate,
    db: Session = Depends(get_db)
):
    """Change a stored rating value"""
    try:
        entry = rating_service.update_rating(db, rating_id, update_data.rating)
    except Exception as e:
        logger.error(f"Update rating error: {e}")
        raise HTTPException(status_code=500, detail="Failed to update rating")
    if not entry:
        raise HTTPException(status_code=404, detail="Rating not found")
    return entry

@router.delete("/{rating_id}")
async def delete_rating(rating_id: int, db: Session = Depends(get_db)):
    """Delete a rating"""
    try:
        success = rating_service.delete_rating(db, rating_id)
    except Exception as e:
        logger.error(f"Delete rating error: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete rating")
    if not success:
        raise HTTPException(status_code=404, detail="Rating not found")
    return {"success": True}
