import redis
import json
import logging
from typing import Optional, Any

logger = logging.getLogger(__name__)

# Cache TTL settings (in seconds)
CACHE_TTL_SHORT = 300  # 5 minutes
CACHE_TTL_MEDIUM = 600  # 10 minutes

# Set by init_cache(); None means caching is disabled
redis_client = None


def init_cache(app):
    """
    Connect to Redis using the app's REDIS_URL.

    An empty URL or a failed ping leaves caching disabled; the API keeps
    working straight against the database.
    """
    global redis_client

    redis_url = app.config.get('REDIS_URL')
    if not redis_url:
        redis_client = None
        logger.info("REDIS_URL not set. Caching is disabled.")
        return None

    try:
        client = redis.Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5
        )
        client.ping()
        redis_client = client
        logger.info("Redis connected successfully")
    except redis.RedisError as e:
        logger.warning(f"Redis connection failed: {str(e)}. Caching will be disabled.")
        redis_client = None

    return redis_client


class CacheManager:
    """Manager for Redis caching operations"""

    @staticmethod
    def is_available() -> bool:
        """Check if Redis is available"""
        return redis_client is not None

    @staticmethod
    def get(key: str) -> Optional[Any]:
        """
        Get value from cache

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found/error
        """
        if not CacheManager.is_available():
            return None

        try:
            value = redis_client.get(key)
            if value:
                return json.loads(value)
            return None
        except (redis.RedisError, ValueError) as e:
            logger.error(f"Cache get error for key '{key}': {str(e)}")
            return None

    @staticmethod
    def set(key: str, value: Any, ttl: int = CACHE_TTL_MEDIUM) -> bool:
        """
        Set value in cache with TTL

        Args:
            key: Cache key
            value: Value to cache (will be JSON serialized)
            ttl: Time to live in seconds

        Returns:
            True if successful, False otherwise
        """
        if not CacheManager.is_available():
            return False

        try:
            redis_client.setex(
                key,
                ttl,
                json.dumps(value, default=str)  # default=str handles datetime, UUID
            )
            logger.debug(f"Cached key '{key}' with TTL {ttl}s")
            return True
        except redis.RedisError as e:
            logger.error(f"Cache set error for key '{key}': {str(e)}")
            return False

    @staticmethod
    def delete_pattern(pattern: str) -> int:
        """
        Delete all keys matching a pattern

        Args:
            pattern: Pattern to match (e.g., 'dating:feed:123:*')

        Returns:
            Number of keys deleted
        """
        if not CacheManager.is_available():
            return 0

        try:
            keys = list(redis_client.scan_iter(match=pattern))
            if keys:
                deleted = redis_client.delete(*keys)
                logger.debug(f"Deleted {deleted} cache keys matching '{pattern}'")
                return deleted
            return 0
        except redis.RedisError as e:
            logger.error(f"Cache delete pattern error for '{pattern}': {str(e)}")
            return 0

    @staticmethod
    def invalidate_user_cache(user_id: str):
        """
        Invalidate the feed and match list cached for a user

        Args:
            user_id: User ID
        """
        patterns = [
            f"dating:feed:{user_id}:*",
            f"dating:matches:{user_id}",
        ]

        for pattern in patterns:
            CacheManager.delete_pattern(pattern)

        logger.debug(f"Invalidated cache for user {user_id}")


# Cache key builders
def build_feed_cache_key(user_id: str, limit: int) -> str:
    """Build cache key for a swiper's profile feed"""
    return f"dating:feed:{user_id}:{limit}"


def build_matches_list_cache_key(user_id: str) -> str:
    """Build cache key for user's matches list"""
    return f"dating:matches:{user_id}"
