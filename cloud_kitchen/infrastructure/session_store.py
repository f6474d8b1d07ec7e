import logging
import time
from typing import Dict, Optional

import redis
from redis.exceptions import RedisError

from cloud_kitchen.core.config import settings

logger = logging.getLogger(__name__)


class SessionRevocationStore:
    """Remembers logged-out session tokens until they would have expired.

    Redis is the primary store so every worker sees a logout; when Redis is
    not configured or goes away, revocations fall back to process memory.
    """

    def __init__(self, redis_url: Optional[str] = None):
        self.redis = None
        self.redis_available = False
        # jti -> unix time the revocation can be forgotten
        self._memory_store: Dict[str, float] = {}

        if redis_url:
            try:
                self.redis = redis.from_url(
                    redis_url,
                    decode_responses=True,
                    socket_connect_timeout=1,  # Fail fast if Redis is down
                )
                self.redis.ping()
                self.redis_available = True
                logger.info("SessionRevocationStore: connected to Redis.")
            except RedisError as e:
                logger.warning("SessionRevocationStore: Redis unreachable (%s). Using RAM fallback.", e)
        else:
            logger.info("SessionRevocationStore: no REDIS_URL, using RAM store.")

    @staticmethod
    def _key(token_id: str) -> str:
        return f"session:revoked:{token_id}"

    def revoke(self, token_id: str, ttl_seconds: int) -> None:
        ttl_seconds = max(int(ttl_seconds), 1)
        if self.redis_available:
            try:
                self.redis.setex(self._key(token_id), ttl_seconds, "1")
            except RedisError as e:
                self._handle_redis_error(e)

        # Always write to RAM so a later Redis outage doesn't resurrect the session
        now = time.time()
        self._prune(now)
        self._memory_store[token_id] = now + ttl_seconds

    def is_revoked(self, token_id: str) -> bool:
        if self.redis_available:
            try:
                if self.redis.exists(self._key(token_id)):
                    return True
            except RedisError as e:
                self._handle_redis_error(e)

        expires_at = self._memory_store.get(token_id)
        if expires_at is None:
            return False
        if expires_at <= time.time():
            self._memory_store.pop(token_id, None)
            return False
        return True

    def _prune(self, now: float) -> None:
        expired = [jti for jti, expires_at in self._memory_store.items() if expires_at <= now]
        for jti in expired:
            del self._memory_store[jti]

    def _handle_redis_error(self, e: RedisError) -> None:
        logger.error("Redis error: %s. Switching to RAM mode.", e)
        self.redis_available = False


def build_session_store() -> SessionRevocationStore:
    return SessionRevocationStore(settings.REDIS_URL)
