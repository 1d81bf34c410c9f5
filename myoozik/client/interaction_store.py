# ============================================================================
# FILE: myoozik/client/interaction_store.py
# Per-playlist rating and comment state for the current visitor
# ============================================================================
import logging
from typing import List, Optional
from myoozik.client.store import Store
from myoozik.config import settings
from myoozik.core.exceptions import DuplicateRatingError
from myoozik.core.ratings import is_valid_rating
from myoozik.schemas.comment import CommentResponse

logger = logging.getLogger(__name__)

ALREADY_RATED_ERROR = "You have already rated this playlist"
RATING_RANGE_ERROR = "Rating must be between 1 and 5"
RATING_ERROR = "Failed to submit rating"
COMMENT_ERROR = "Failed to post comment"
COMMENTS_LOAD_ERROR = "Failed to load comments"


class InteractionStore(Store):
    """
    The visitor has no local identity; the server recognizes them by IP.
    `has_rated` is therefore a cached view of the server's answer and is
    corrected whenever the server rejects a rating as a duplicate.
    """

    def __init__(self, api):
        super().__init__()
        self.api = api
        self.comments: List[CommentResponse] = []
        self.has_rated = False
        self.is_submitting_rating = False
        self.is_submitting_comment = False
        self.is_loading_comments = False
        self.error: Optional[str] = None

        # reset() bumps every counter so late responses from a left page are dropped
        self._generation = 0
        self._rated_request = 0
        self._comments_request = 0

    async def check_if_rated(self, playlist_id: int):
        """Ask the server; on failure assume not rated and let the server decide later"""
        self._rated_request += 1
        request = self._rated_request
        try:
            has_rated = await self.api.has_rated(playlist_id)
        except Exception as e:
            logger.warning(f"Error checking rating status for playlist {playlist_id}: {e}")
            has_rated = False
        if request != self._rated_request:
            logger.debug(f"Discarding stale rating status for playlist {playlist_id}")
            return
        self._set(has_rated=has_rated)

    async def submit_rating(self, playlist_id: int, rating: int) -> bool:
        """
        Submit a 1-5 rating. Returns True only when a new rating was stored.
        A duplicate rejection is not a failure: it marks the playlist rated.
        """
        if self.has_rated:
            return False
        if not is_valid_rating(rating):
            self._set(error=RATING_RANGE_ERROR)
            return False

        generation = self._generation
        self._set(is_submitting_rating=True, error=None)
        try:
            await self.api.submit_rating(playlist_id, rating)
        except DuplicateRatingError:
            logger.info(f"Playlist {playlist_id} was already rated from this address")
            if generation != self._generation:
                return False
            self._set(has_rated=True, error=ALREADY_RATED_ERROR, is_submitting_rating=False)
            return False
        except Exception as e:
            logger.error(f"Error submitting rating: {e}")
            if generation == self._generation:
                self._set(error=RATING_ERROR, is_submitting_rating=False)
            return False

        if generation != self._generation:
            # Stored, but the page it was made on is gone
            return False
        self._set(has_rated=True, is_submitting_rating=False)
        return True

    async def submit_comment(self, playlist_id: int, content: str, nickname: str = ""):
        """Post a comment, then reload the feed from the server"""
        content = (content or "").strip()
        if not content:
            return

        nickname = (nickname or "").strip()[:settings.NICKNAME_MAX_LENGTH] or settings.DEFAULT_NICKNAME

        generation = self._generation
        self._set(is_submitting_comment=True, error=None)
        try:
            await self.api.create_comment(playlist_id, content, nickname)
        except Exception as e:
            logger.error(f"Error submitting comment: {e}")
            if generation == self._generation:
                self._set(error=COMMENT_ERROR, is_submitting_comment=False)
            return

        if generation != self._generation:
            return
        self._set(is_submitting_comment=False)
        await self.fetch_comments(playlist_id)

    async def fetch_comments(self, playlist_id: int):
        """Replace the feed, newest first"""
        self._comments_request += 1
        request = self._comments_request
        self._set(is_loading_comments=True, error=None)
        try:
            comments = await self.api.get_comments(playlist_id)
        except Exception as e:
            logger.error(f"Error fetching comments: {e}")
            if request == self._comments_request:
                self._set(error=COMMENTS_LOAD_ERROR, is_loading_comments=False)
            return

        if request != self._comments_request:
            logger.debug(f"Discarding stale comments for playlist {playlist_id}")
            return

        comments = sorted(comments, key=lambda c: (c.created_at, c.id), reverse=True)
        self._set(comments=comments, is_loading_comments=False)

    def reset(self):
        self._generation += 1
        self._rated_request += 1
        self._comments_request += 1
        self._set(
            comments=[],
            has_rated=False,
            is_submitting_rating=False,
            is_submitting_comment=False,
            is_loading_comments=False,
            error=None,
        )
