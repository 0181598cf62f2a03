"""
User repository with async CRUD operations
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.models.enums import UserRole
from paywallet.models.user import User


async def create_user(
    session: AsyncSession,
    username: str,
    email: str,
    password_hash: str,
    role: UserRole = UserRole.USER,
    full_name: Optional[str] = None,
    phone_number: Optional[str] = None
) -> User:
    """
    Create a new user.

    Args:
        session: Database session
        username: Username (must be unique)
        email: Email address (must be unique)
        password_hash: Already hashed password
        role: User role (default: USER)
        full_name: Display name (optional)
        phone_number: Phone number (optional)

    Returns:
        Created User instance
    """
    user = User(
        username=username,
        email=email,
        password_hash=password_hash,
        role=role,
        full_name=full_name,
        phone_number=phone_number
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def get_user_by_id(session: AsyncSession, user_id: UUID) -> Optional[User]:
    """
    Get user by ID.

    Args:
        session: Database session
        user_id: User UUID

    Returns:
        User instance or None if not found
    """
    result = await session.execute(
        select(User).where(User.id == user_id)
    )
    return result.scalar_one_or_none()


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.username == username)
    )
    return result.scalar_one_or_none()


async def is_admin(session: AsyncSession, user_id: UUID) -> bool:
    """True when the user exists and carries the admin role"""
    result = await session.execute(
        select(User.role).where(User.id == user_id)
    )
    return result.scalar_one_or_none() == UserRole.ADMIN
