# ============================================================================
# FILE: myoozik/core/cache.py
# ============================================================================
import redis
import json
from typing import Optional, Any
from myoozik.config import settings
import logging

logger = logging.getLogger(__name__)

class RedisCache:
    """JSON cache on Redis; every operation degrades to a miss when Redis is down"""

    def __init__(self, url: Optional[str] = None, default_expire: Optional[int] = None):
        self.default_expire = default_expire or settings.CACHE_EXPIRE_SECONDS
        try:
            self.redis_client = redis.from_url(
                url or settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=2,
            )
            self.redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning(f"Redis connection failed: {e}. Caching disabled.")
            self.redis_client = None

    @property
    def enabled(self) -> bool:
        return self.redis_client is not None

    def set_cache(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        """Set a cache value; expire defaults to CACHE_EXPIRE_SECONDS"""
        if not self.redis_client:
            return False

        try:
            self.redis_client.setex(key, expire or self.default_expire, json.dumps(value))
            return True
        except Exception as e:
            logger.error(f"Cache set error: {e}")
            return False

    def get_cache(self, key: str) -> Optional[Any]:
        """Get a cache value"""
        if not self.redis_client:
            return None

        try:
            value = self.redis_client.get(key)
            if value:
                return json.loads(value)
            return None
        except Exception as e:
            logger.error(f"Cache get error: {e}")
            return None

    def delete_cache(self, key: str) -> bool:
        """Delete a cache value"""
        if not self.redis_client:
            return False

        try:
            self.redis_client.delete(key)
            return True
        except Exception as e:
            logger.error(f"Cache delete error: {e}")
            return False

# Singleton instance
cache = RedisCache()
