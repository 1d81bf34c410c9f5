# ============================================================================
# FILE: myoozik/client/api_client.py
# Async client for the myoozik REST API (the stores' persistence collaborator)
# ============================================================================
import httpx
import logging
from typing import List, Optional
from myoozik.config import settings
from myoozik.core.exceptions import ApiError, DuplicateRatingError
from myoozik.schemas.playlist import PlaylistResponse, PlaylistSummary
from myoozik.schemas.song import SongResponse
from myoozik.schemas.rating import RatingResponse
from myoozik.schemas.comment import CommentResponse

logger = logging.getLogger(__name__)

ALREADY_RATED = "already_rated"


class MyoozikApiClient:
    """
    Thin async wrapper over the REST API.

    Every request is bounded by HTTP_TIMEOUT_SECONDS and never retried;
    retrying is left to the user. Failures raise ApiError, except a
    duplicate rating which raises DuplicateRatingError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def close(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def _request(self, method: str, url: str, **kwargs):
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise ApiError(f"{method} {url} timed out") from e
        except httpx.HTTPError as e:
            raise ApiError(f"{method} {url} failed: {e}") from e

        if response.is_success:
            return response.json()

        try:
            detail = response.json().get("detail")
        except ValueError:
            detail = None
        raise ApiError(
            f"{method} {url} returned {response.status_code}",
            status_code=response.status_code,
            detail=detail if isinstance(detail, str) else None,
        )

    # Playlists

    async def list_playlists(self) -> List[PlaylistSummary]:
        data = await self._request("GET", "/playlists")
        return [PlaylistSummary.model_validate(item) for item in data]

    async def get_playlist(self, playlist_id: int) -> PlaylistResponse:
        return PlaylistResponse.model_validate(await self._request("GET", f"/playlists/{playlist_id}"))

    async def get_songs(self, playlist_id: int) -> List[SongResponse]:
        data = await self._request("GET", f"/playlists/{playlist_id}/songs")
        return [SongResponse.model_validate(item) for item in data]

    async def get_ratings(self, playlist_id: int) -> List[RatingResponse]:
        data = await self._request("GET", f"/playlists/{playlist_id}/ratings")
        return [RatingResponse.model_validate(item) for item in data]

    # Ratings

    async def has_rated(self, playlist_id: int) -> bool:
        data = await self._request("GET", f"/ratings/playlist/{playlist_id}/status")
        return bool(data.get("has_rated"))

    async def submit_rating(self, playlist_id: int, rating: int) -> RatingResponse:
        try:
            data = await self._request(
                "POST", "/ratings/playlist", json={"playlist_id": playlist_id, "rating": rating}
            )
        except ApiError as e:
            if e.status_code == 409 and e.detail == ALREADY_RATED:
                raise DuplicateRatingError(playlist_id) from e
            raise
        return RatingResponse.model_validate(data)

    # Comments

    async def get_comments(self, playlist_id: int) -> List[CommentResponse]:
        data = await self._request("GET", f"/playlists/{playlist_id}/comments")
        return [CommentResponse.model_validate(item) for item in data]

    async def create_comment(self, playlist_id: int, content: str, nickname: str) -> CommentResponse:
        data = await self._request(
            "POST", f"/playlists/{playlist_id}/comments", json={"content": content, "nickname": nickname}
        )
        return CommentResponse.model_validate(data)
