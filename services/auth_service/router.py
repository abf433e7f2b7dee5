from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import settings
from shared.config.database import get_db
from shared.security import Actor, get_current_user, limiter

from .schemas import ProfileUpdate, TokenResponse, UserCreate, UserLogin, UserResponse
from .service import AuthService

router = APIRouter(tags=["Authentication"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "auth", "status": "running"}


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new customer, restaurant or rider account",
)
async def register(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    return await AuthService.register(db, payload)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Authenticate and receive a JWT access token",
)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(request: Request, payload: UserLogin, db: AsyncSession = Depends(get_db)):
    return await AuthService.login(db, payload)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current authenticated user's profile",
)
async def get_me(
    actor: Actor = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await AuthService.get_user_by_id(db, actor.id)


@router.put(
    "/me",
    response_model=UserResponse,
    summary="Update the current user's name or image",
)
async def update_me(
    payload: ProfileUpdate,
    actor: Actor = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await AuthService.update_profile(db, actor.id, payload)
