"""
Rate Limiting
=============

Redis-based fixed-window rate limiting for the credential endpoints.

Attempts are counted per client IP. Redis failures let the request
through.
"""

import logging
from typing import Optional

from fastapi import Request

from deskflow.core.errors import RateLimitError
from deskflow.services.cache import get_redis

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-window counter in Redis.

    Default limits:
        - auth (login/register): 10 requests/minute
    """

    LIMITS = {
        "auth": {"max_requests": 10, "window_seconds": 60},
    }

    @staticmethod
    def _get_key(identifier: str, action: str) -> str:
        return f"ratelimit:{action}:{identifier}"

    @staticmethod
    async def check_rate_limit(
        identifier: str,
        action: str,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ) -> dict:
        """
        Count one attempt and report whether it is within the limit.

        Returns:
            Dict with 'allowed', 'remaining', 'reset_in' keys
        """
        limits = RateLimiter.LIMITS[action]
        max_req = max_requests or limits["max_requests"]
        window = window_seconds or limits["window_seconds"]

        key = RateLimiter._get_key(identifier, action)

        try:
            client = await get_redis()
            count = await client.incr(key)

            if count == 1:
                await client.expire(key, window)
                reset_in = window
            else:
                reset_in = await client.ttl(key)
                if reset_in < 0:
                    # Counter without expiry would never reset
                    await client.expire(key, window)
                    reset_in = window

            if count > max_req:
                return {"allowed": False, "remaining": 0, "reset_in": reset_in}

            return {"allowed": True, "remaining": max_req - count, "reset_in": reset_in}
        except Exception as e:
            logger.warning("Rate limit check error for %s: %s", key, e)
            return {"allowed": True, "remaining": max_req, "reset_in": window}


def create_rate_limit_dependency(action: str):
    """
    Factory for rate limit dependencies.

    Usage:
        @router.post("/login", dependencies=[Depends(create_rate_limit_dependency("auth"))])
    """
    async def dependency(request: Request) -> None:
        identifier = request.client.host if request.client else "unknown"
        result = await RateLimiter.check_rate_limit(identifier, action)
        if not result["allowed"]:
            logger.info("Rate limited %s on %s", identifier, action)
            raise RateLimitError(retry_after=result["reset_in"])

    return dependency
