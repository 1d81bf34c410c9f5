# ============================================================================
# FILE: myoozik/api/v1/router.py
# ============================================================================
from fastapi import APIRouter
from myoozik.api.v1.endpoints import playlists, songs, ratings, comments, youtube

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(playlists.router, prefix="/playlists", tags=["playlists"])
api_router.include_router(songs.router, prefix="/songs", tags=["songs"])
api_router.include_router(ratings.router, prefix="/ratings", tags=["ratings"])
api_router.include_router(comments.router, prefix="/comments", tags=["comments"])
api_router.include_router(youtube.router, prefix="/youtube", tags=["youtube"])
