from __future__ import annotations

from redis import Redis
from redis.connection import ConnectionPool

from localconnect.core.config import settings

_pool: ConnectionPool | None = None


def get_redis() -> Redis:
    global _pool
    if _pool is None:
        # Short timeouts keep the fail-open paths fast when Redis is down
        _pool = ConnectionPool.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=settings.redis_socket_timeout,
            socket_timeout=settings.redis_socket_timeout,
        )
    return Redis(connection_pool=_pool)
