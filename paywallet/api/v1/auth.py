"""
Authentication API endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.core.auth import create_access_token, get_password_hash, verify_password
from paywallet.core.config import settings
from paywallet.db.session import get_db
from paywallet.repos.user_repo import create_user, get_user_by_username

router = APIRouter()


class UserRegister(BaseModel):
    """User registration request model"""
    username: str = Field(..., min_length=3, max_length=48)
    email: str
    password: str = Field(..., min_length=8)
    full_name: Optional[str] = None
    phone_number: Optional[str] = None


class UserLogin(BaseModel):
    """User login request model"""
    username: str
    password: str


class TokenResponse(BaseModel):
    """Token response model"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


def _token_for(user_id) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(data={"sub": str(user_id)}),
        expires_in=settings.jwt_access_token_expire_minutes * 60
    )


@router.post("/auth/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserRegister,
    session: AsyncSession = Depends(get_db)
):
    """
    Register a new user account.

    Wallets are opened separately through POST /wallets.
    """
    existing_user = await get_user_by_username(session, user_data.username)
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered"
        )

    user = await create_user(
        session=session,
        username=user_data.username,
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
        full_name=user_data.full_name,
        phone_number=user_data.phone_number
    )
    return _token_for(user.id)


@router.post("/auth/login", response_model=TokenResponse)
async def login_user(
    login_data: UserLogin,
    session: AsyncSession = Depends(get_db)
):
    """Login with username/password."""
    user = await get_user_by_username(session, login_data.username)
    if not user or not verify_password(login_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )
    return _token_for(user.id)
