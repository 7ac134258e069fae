from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from pathforge.core.database import get_db
from pathforge.core.security import verify_password, get_password_hash, create_access_token
from pathforge.core.rate_limiter import limiter
from pathforge.core.logging_config import logger
from pathforge.models.user import User
from pathforge.schemas.auth import UserRegister, UserLogin, UserResponse, TokenResponse
from pathforge.modules.auth.dependencies import get_current_user

router = APIRouter()


def build_token_response(user: User) -> TokenResponse:
    access_token = create_access_token(data={"sub": str(user.id), "email": user.email, "role": user.role.value})
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
async def register(
    request: Request,
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """Register new user (rate limited: 3/min)"""
    client_ip = request.client.host if request.client else "unknown"
    email = user_data.email.lower()

    result = await db.execute(
        select(User).where(User.email == email)
    )
    if result.scalar_one_or_none():
        logger.log_auth_event(
            event="register",
            success=False,
            user_email=email,
            reason="Email already registered",
            client_ip=client_ip
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    user = User(
        name=user_data.name.strip(),
        email=email,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role,
        is_active=True,
        onboarding_completed=False,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.log_auth_event(event="register", success=True, user_email=email, role=user.role.value, client_ip=client_ip)
    return build_token_response(user)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("5/minute")
async def login(
    request: Request,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login with email and password (rate limited: 5/min)"""
    client_ip = request.client.host if request.client else "unknown"
    email = credentials.email.lower()

    result = await db.execute(
        select(User).where(User.email == email)
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.log_auth_event(
            event="login",
            success=False,
            user_email=email,
            reason="Invalid credentials",
            client_ip=client_ip
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    logger.log_auth_event(event="login", success=True, user_email=email, client_ip=client_ip)
    return build_token_response(user)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return current_user
