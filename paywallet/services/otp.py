"""
One-time codes for transfer step-up authentication, stored in Redis
"""

import hmac
import logging
import os
import secrets
from typing import Optional
from uuid import UUID

import redis.asyncio as redis

from paywallet.core.config import settings

logger = logging.getLogger(__name__)

REDIS_URL = os.environ.get("REDIS_URL", settings.redis_url)


class OtpVerifier:
    """Base one-time code interface"""

    async def issue_code(self, user_id: UUID) -> str:
        raise NotImplementedError

    async def verify_code(self, user_id: UUID, code: str) -> bool:
        """True when the code matches the one issued to the user; codes are single use"""
        raise NotImplementedError


class RedisOtpVerifier(OtpVerifier):
    """Keeps one pending code per user under ``otp:<user id>`` with a TTL"""

    def __init__(self, redis_client=None, ttl_seconds: int = None):
        self.redis_client = redis_client or redis.from_url(REDIS_URL, decode_responses=True)
        self.ttl_seconds = ttl_seconds or settings.otp_ttl_seconds

    @staticmethod
    def _key(user_id: UUID) -> str:
        return f"otp:{user_id}"

    async def issue_code(self, user_id):
        code = f"{secrets.randbelow(1_000_000):06d}"
        await self.redis_client.setex(self._key(user_id), self.ttl_seconds, code)
        logger.info(f"Issued one-time code for user {user_id}")
        return code

    async def verify_code(self, user_id, code):
        key = self._key(user_id)
        expected = await self.redis_client.get(key)
        if expected is None or not hmac.compare_digest(str(expected), str(code)):
            logger.warning(f"One-time code rejected for user {user_id}")
            return False
        await self.redis_client.delete(key)
        return True


_verifier: Optional[OtpVerifier] = None


def get_otp_verifier() -> OtpVerifier:
    global _verifier
    if _verifier is None:
        _verifier = RedisOtpVerifier()
    return _verifier


def set_otp_verifier(verifier: OtpVerifier) -> None:
    global _verifier
    _verifier = verifier
