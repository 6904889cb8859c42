"""
Redis caching utilities for frequently read booking data
Fails open: when Redis is unavailable every lookup is a miss
"""
import json
import logging
from typing import Any, Optional

import redis

from .config import AVAILABILITY_CACHE_TTL, REDIS_URL

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None


def get_redis_client() -> redis.Redis:
    """Get or create the Redis client from REDIS_URL"""
    global redis_client

    if redis_client is None:
        if not REDIS_URL:
            raise RuntimeError("REDIS_URL not configured")

        # Mask password in URL for logging
        masked_url = f"{REDIS_URL.split(':')[0]}:****@{REDIS_URL.split('@')[1]}" if "@" in REDIS_URL else "****"
        logger.info(f"📡 Using Redis URL connection: {masked_url}")

        client = redis.from_url(
            REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        client.ping()
        redis_client = client
        logger.info("Redis connected successfully via URL")

    return redis_client


class Cache:
    """Redis cache wrapper with automatic serialization"""

    def __init__(self):
        self.redis_client = None
        self.disabled = False

    def _get_client(self):
        """Lazy load Redis client; a failed connection disables the cache for this process"""
        if self.disabled:
            return None
        if self.redis_client is None:
            try:
                self.redis_client = get_redis_client()
            except Exception as e:
                logger.warning(f"⚠️ Redis cache unavailable: {e}")
                self.disabled = True
                return None
        return self.redis_client

    def get(self, key: str) -> Optional[Any]:
        client = self._get_client()
        if not client:
            return None

        try:
            value = client.get(key)
            if value:
                logger.debug(f"✅ Cache HIT: {key}")
                return json.loads(value)
            logger.debug(f"❌ Cache MISS: {key}")
            return None
        except Exception as e:
            logger.error(f"❌ Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """Set value in cache with TTL (default 1 hour)"""
        client = self._get_client()
        if not client:
            return False

        try:
            client.setex(key, ttl, json.dumps(value))
            logger.debug(f"✅ Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"❌ Cache set error for {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        client = self._get_client()
        if not client:
            return False

        try:
            client.delete(key)
            logger.debug(f"✅ Cache DELETE: {key}")
            return True
        except Exception as e:
            logger.error(f"❌ Cache delete error for {key}: {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern (e.g., 'availability:diego:*')"""
        client = self._get_client()
        if not client:
            return 0

        try:
            keys = client.keys(pattern)
            if keys:
                deleted = client.delete(*keys)
                logger.debug(f"✅ Cache DELETE pattern: {pattern} ({deleted} keys)")
                return deleted
            return 0
        except Exception as e:
            logger.error(f"❌ Cache delete pattern error for {pattern}: {e}")
            return 0


# Global cache instance
cache = Cache()


def availability_key(username: str, date: str) -> str:
    return f"availability:{username}:{date}"


def get_availability_cached(username: str, date: str) -> Optional[dict]:
    return cache.get(availability_key(username, date))


def set_availability_cached(username: str, date: str, availability: dict) -> bool:
    return cache.set(availability_key(username, date), availability, AVAILABILITY_CACHE_TTL)


def invalidate_availability_cache(username: str, date: str) -> bool:
    """Drop the cached slots for a day once a booking lands on it"""
    return cache.delete(availability_key(username, date))


def invalidate_user_availability_cache(username: str) -> int:
    """Drop every cached day of a user once their time intervals change"""
    return cache.delete_pattern(availability_key(username, "*"))
