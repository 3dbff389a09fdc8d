"""
Redis fixed-window rate limiting.

Fails open: if Redis is down the request is allowed and the failure logged.
"""
import logging
import time
from typing import Any, Callable, Dict, Optional

import redis
from fastapi import Depends, Request

from app.core.config import settings
from app.core.dependencies import optional_session
from app.core.exceptions import TooManyRequests
from app.session import get_redis_client

logger = logging.getLogger(__name__)


def hit(scope: str, identity: str, limit: int, window_seconds: int, now: Optional[float] = None) -> bool:
    """
    Count one request for (scope, identity) in the current window.

    Returns True while the caller is within `limit`, False once exceeded.
    """
    now = time.time() if now is None else now
    window = int(now // window_seconds)
    key = f"ratelimit:{scope}:{identity}:{window}"
    try:
        client = get_redis_client()
        pipe = client.pipeline()
        pipe.incr(key)
        pipe.expire(key, window_seconds)
        count, _ = pipe.execute()
    except (redis.RedisError, RuntimeError) as e:
        logger.warning("Rate limiter unavailable, allowing request: %s", e)
        return True
    return int(count) <= limit


def rate_limit(scope: str, limit: int, window_seconds: Optional[int] = None) -> Callable:
    """Dependency factory. Identity is the session user, else the client IP."""
    window = window_seconds or settings.RATE_LIMIT_WINDOW

    async def _limiter(
        request: Request,
        session: Optional[Dict[str, Any]] = Depends(optional_session),
    ) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return
        if session and session.get("user_id"):
            identity = f"user:{session['user_id']}"
        else:
            identity = f"ip:{request.client.host if request.client else 'unknown'}"
        if not hit(scope, identity, limit, window):
            logger.info("Rate limit exceeded: scope=%s identity=%s", scope, identity)
            raise TooManyRequests()

    return _limiter
