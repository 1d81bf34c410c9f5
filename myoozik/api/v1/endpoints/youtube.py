# ============================================================================
# FILE: myoozik/api/v1/endpoints/youtube.py
# YouTube Data API passthrough endpoints used by the add-playlist flow
# ============================================================================
from fastapi import APIRouter, HTTPException, Query
from myoozik.core import youtube_client as youtube_module
from myoozik.core.exceptions import YouTubeApiError
from myoozik.schemas.youtube import YouTubePlaylist, YouTubeVideo
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/playlist", response_model=YouTubePlaylist)
async def get_playlist_metadata(id: str = Query(..., min_length=1, description="YouTube playlist ID")):
    """
    Get playlist title, description and ordered videos

    **Caching**: Results are cached in Redis to minimize API quota usage

    Raises:
        HTTPException: 404 if the playlist does not exist, 502 on API error
    """
    logger.info(f"Fetching playlist metadata for: {id}")

    try:
        playlist_data = youtube_module.youtube_client.get_playlist_metadata(id)
    except YouTubeApiError as e:
        logger.error(f"Error fetching playlist: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch playlist data")

    if not playlist_data:
        raise HTTPException(status_code=404, detail="Playlist not found")

    return playlist_data


@router.get("/video", response_model=YouTubeVideo)
async def get_video_metadata(id: str = Query(..., min_length=1, description="YouTube video ID")):
    """
    Get normalized metadata for one video

    Raises:
        HTTPException: 404 if the video does not exist, 502 on API error
    """
    logger.info(f"Fetching video metadata for: {id}")

    try:
        video_data = youtube_module.youtube_client.get_video_metadata(id)
    except YouTubeApiError as e:
        logger.error(f"Error fetching video: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch video data")

    if not video_data:
        raise HTTPException(status_code=404, detail="Video not found")

    return video_data
