#!/usr/bin/env python3
"""
Seed an admin user so offers and KYC tiers can be managed.
Usage:
  ADMIN_USERNAME=admin ADMIN_EMAIL=admin@paywallet.local ADMIN_PASSWORD=ChangeMeNow! python -m paywallet.scripts.seed_admin
"""
import asyncio
import logging
import os

from paywallet.core.auth import get_password_hash
from paywallet.db.session import AsyncSessionLocal
from paywallet.models.enums import UserRole
from paywallet.repos.user_repo import create_user, get_user_by_username

logger = logging.getLogger(__name__)

ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin")
ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@paywallet.local")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "ChangeMeNow!")


async def run():
    async with AsyncSessionLocal() as session:
        existing = await get_user_by_username(session, ADMIN_USERNAME)
        if existing:
            logger.info(f"Admin exists: {ADMIN_USERNAME}")
            return
        await create_user(
            session,
            username=ADMIN_USERNAME,
            email=ADMIN_EMAIL,
            password_hash=get_password_hash(ADMIN_PASSWORD),
            role=UserRole.ADMIN
        )
        logger.info(f"Created admin: {ADMIN_USERNAME}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(run())
