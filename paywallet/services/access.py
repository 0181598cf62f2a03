"""
Wallet ownership checks shared by the services
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.core.errors import UnauthorizedError
from paywallet.models.wallet import Wallet
from paywallet.repos.user_repo import is_admin


async def authorize_wallet_access(
    session: AsyncSession,
    wallet: Wallet,
    caller_id: Optional[UUID],
    action: str,
    allow_admin: bool = False
) -> None:
    """
    Raise UnauthorizedError unless the caller owns the wallet.

    Args:
        session: Database session
        wallet: Wallet being accessed
        caller_id: Authenticated user, None for internal calls
        action: Short description used in the error message
        allow_admin: Let admins through as well (read paths)
    """
    if caller_id is None or wallet.owner_id == caller_id:
        return
    if allow_admin and await is_admin(session, caller_id):
        return
    raise UnauthorizedError(f"You are not allowed to {action} this wallet")


async def require_admin(session: AsyncSession, caller_id: Optional[UUID], action: str) -> None:
    if caller_id is None or await is_admin(session, caller_id):
        return
    raise UnauthorizedError(f"Only administrators can {action}")
