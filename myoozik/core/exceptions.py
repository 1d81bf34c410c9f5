# ============================================================================
# FILE: myoozik/core/exceptions.py
# Domain exceptions shared by the service layer and the client stores
# ============================================================================
from typing import Optional


class MyoozikError(Exception):
    """Base exception for all myoozik errors"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PlaylistNotFoundError(MyoozikError):
    """Raised when a playlist id does not exist"""


class InvalidPlaylistUrlError(MyoozikError):
    """Raised when a URL does not contain a YouTube playlist id"""


class DuplicateRatingError(MyoozikError):
    """
    Raised when the same identity rates the same playlist twice.
    This is an expected outcome, not a failure: the caller reconciles
    its "already rated" state from it.
    """

    def __init__(self, playlist_id: int):
        self.playlist_id = playlist_id
        super().__init__(f"Playlist {playlist_id} already rated from this address")


class YouTubeApiError(MyoozikError):
    """Raised when the YouTube Data API is unreachable or misconfigured"""


class ApiError(MyoozikError):
    """Non-success response (or transport failure) from the myoozik REST API"""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class PlayerInitError(MyoozikError):
    """Reported by the player adapter when the embed runtime cannot be initialized"""
