# ============================================================================
# FILE: myoozik/core/youtube_client.py
# YouTube Data API v3 client for playlist ingestion and video metadata
# ============================================================================
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from typing import Dict, List, Optional
from myoozik.config import settings
from myoozik.core.cache import cache
from myoozik.core.exceptions import YouTubeApiError
import logging
import re

logger = logging.getLogger(__name__)

# videos().list and playlistItems().list both cap maxResults at 50
PAGE_SIZE = 50

VIDEO_URL_PATTERN = re.compile(r"^.*((youtu.be/)|(v/)|(/u/\w/)|(embed/)|(watch\?))\??v?=?([^#&?]*).*")
PLAYLIST_URL_PATTERN = re.compile(r"[&?]list=([a-zA-Z0-9_-]+)")
ISO_DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def extract_video_id(url: str) -> Optional[str]:
    """Return the 11-character video id from any common YouTube URL form"""
    match = VIDEO_URL_PATTERN.match(url or "")
    if match and len(match.group(7)) == 11:
        return match.group(7)
    return None


def extract_playlist_id(url: str) -> Optional[str]:
    """Return the `list=` parameter of a YouTube URL"""
    match = PLAYLIST_URL_PATTERN.search(url or "")
    return match.group(1) if match else None


def format_duration(iso_duration: Optional[str]) -> str:
    """
    Convert an ISO 8601 duration to a display string.

    PT3M5S -> "3:05", PT1H2M3S -> "1:02:03"
    """
    match = ISO_DURATION_PATTERN.search(iso_duration or "")
    hours, minutes, seconds = (int(g) if g else 0 for g in (match.groups() if match else (None, None, None)))

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def derive_artist(title: str) -> Optional[str]:
    """Most music uploads are titled "Artist - Song"; anything else has no artist"""
    if title and " - " in title:
        return title.split(" - ")[0].strip() or None
    return None


def pick_thumbnail(thumbnails: Optional[Dict]) -> Optional[str]:
    thumbnails = thumbnails or {}
    for size in ("high", "medium", "default"):
        if thumbnails.get(size, {}).get("url"):
            return thumbnails[size]["url"]
    return None


class YouTubeClient:
    """
    YouTube Data API v3 client for fetching playlist and video metadata.
    Implements caching to minimize API quota usage.

    The output is already normalized for ingestion: every video is a dict
    with id, title, artist, thumbnail_url and duration ("M:SS" / "H:MM:SS").
    """

    def __init__(self, api_key: Optional[str] = None, service=None, cache_backend=None):
        """Initialize YouTube API client (a prebuilt `service` skips discovery)"""
        self.api_key = api_key if api_key is not None else settings.YOUTUBE_API_KEY
        self.cache = cache_backend if cache_backend is not None else cache
        self.youtube = service

        if self.youtube is None and self.api_key:
            try:
                self.youtube = build(
                    settings.YOUTUBE_API_SERVICE_NAME,
                    settings.YOUTUBE_API_VERSION,
                    developerKey=self.api_key,
                    cache_discovery=False,
                )
                logger.info("YouTube API client initialized successfully")
            except Exception as e:
                logger.error(f"Failed to initialize YouTube API client: {e}")
        elif self.youtube is None:
            logger.warning("YouTube API key not configured")

    def _require_service(self):
        if not self.youtube:
            raise YouTubeApiError("YouTube API client not initialized. Check YOUTUBE_API_KEY.")
        return self.youtube

    def _normalize_video(self, item: Dict) -> Dict:
        snippet = item.get("snippet", {})
        title = snippet.get("title") or ""
        return {
            "id": item["id"],
            "title": title,
            "artist": derive_artist(title),
            "thumbnail_url": pick_thumbnail(snippet.get("thumbnails")),
            "duration": format_duration(item.get("contentDetails", {}).get("duration")),
        }

    def _fetch_videos(self, video_ids: List[str]) -> List[Dict]:
        """Fetch video details in chunks, preserving the order of video_ids"""
        youtube = self._require_service()
        found = {}
        for start in range(0, len(video_ids), PAGE_SIZE):
            chunk = video_ids[start:start + PAGE_SIZE]
            response = youtube.videos().list(
                part="snippet,contentDetails",
                id=",".join(chunk),
            ).execute()
            for item in response.get("items", []):
                found[item["id"]] = self._normalize_video(item)

        # Private and deleted videos are absent from videos().list
        return [found[video_id] for video_id in video_ids if video_id in found]

    def _fetch_playlist_video_ids(self, playlist_id: str) -> List[str]:
        youtube = self._require_service()
        video_ids: List[str] = []
        page_token = None

        while len(video_ids) < settings.YOUTUBE_MAX_PLAYLIST_ITEMS:
            response = youtube.playlistItems().list(
                part="snippet,contentDetails",
                playlistId=playlist_id,
                maxResults=PAGE_SIZE,
                pageToken=page_token,
            ).execute()

            for item in response.get("items", []):
                video_id = item.get("contentDetails", {}).get("videoId")
                if video_id and video_id not in video_ids:
                    video_ids.append(video_id)

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        return video_ids[:settings.YOUTUBE_MAX_PLAYLIST_ITEMS]

    def get_video_metadata(self, video_id: str) -> Optional[Dict]:
        """
        Get normalized metadata for a single video.
        Results are cached in Redis.

        Returns:
            Dict with video metadata or None if the video does not exist

        Raises:
            YouTubeApiError: API not configured or request failed
        """
        cache_key = f"youtube:video:{video_id}"
        cached_data = self.cache.get_cache(cache_key)
        if cached_data:
            logger.info(f"Cache hit for video metadata: {video_id}")
            return cached_data

        try:
            videos = self._fetch_videos([video_id])
        except HttpError as e:
            logger.error(f"YouTube API error for video {video_id}: {e}")
            raise YouTubeApiError(f"YouTube API error for video {video_id}") from e

        if not videos:
            logger.warning(f"No video found for ID: {video_id}")
            return None

        self.cache.set_cache(cache_key, videos[0])
        return videos[0]

    def get_playlist_metadata(self, playlist_id: str) -> Optional[Dict]:
        """
        Get playlist title, description and its ordered, normalized videos.
        Results are cached in Redis.

        Args:
            playlist_id: YouTube playlist ID (the `list=` URL parameter)

        Returns:
            Dict with id, title, description and videos, or None if the
            playlist does not exist

        Raises:
            YouTubeApiError: API not configured or request failed
        """
        cache_key = f"youtube:playlist:{playlist_id}"
        cached_data = self.cache.get_cache(cache_key)
        if cached_data:
            logger.info(f"Cache hit for playlist metadata: {playlist_id}")
            return cached_data

        youtube = self._require_service()
        try:
            response = youtube.playlists().list(part="snippet", id=playlist_id).execute()
            if not response.get("items"):
                logger.warning(f"No playlist found for ID: {playlist_id}")
                return None

            snippet = response["items"][0].get("snippet", {})
            videos = self._fetch_videos(self._fetch_playlist_video_ids(playlist_id))
        except HttpError as e:
            logger.error(f"YouTube API error for playlist {playlist_id}: {e}")
            raise YouTubeApiError(f"YouTube API error for playlist {playlist_id}") from e

        playlist_data = {
            "id": playlist_id,
            "title": snippet.get("title") or "Untitled playlist",
            "description": snippet.get("description") or None,
            "videos": videos,
        }

        self.cache.set_cache(cache_key, playlist_data)
        logger.info(f"Fetched and cached playlist {playlist_id} ({len(videos)} videos)")
        return playlist_data

    def forget_playlist(self, playlist_id: str) -> None:
        """Drop cached metadata so the next fetch sees the playlist as it is now"""
        self.cache.delete_cache(f"youtube:playlist:{playlist_id}")


# Singleton instance
youtube_client = YouTubeClient()
