from fastapi import HTTPException, status
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import ConflictError, NotFoundError
from shared.security.jwt_handler import create_access_token

from .models import User
from .repository import UserRepository
from .schemas import ProfileUpdate, TokenResponse, UserCreate, UserLogin, UserResponse

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthService:

    @staticmethod
    def _hash_password(password: str) -> str:
        return _pwd_context.hash(password)

    @staticmethod
    def _verify_password(plain: str, hashed: str) -> bool:
        return _pwd_context.verify(plain, hashed)

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(data={"sub": user.id, "role": user.role.value})

    @staticmethod
    async def register(db: AsyncSession, data: UserCreate) -> User:
        existing = await UserRepository.get_by_email(db, data.email)
        if existing:
            raise ConflictError("Email already registered")
        user = User(
            name=data.name,
            email=data.email,
            role=data.role,
            hashed_password=AuthService._hash_password(data.password),
        )
        return await UserRepository.create(db, user)

    @staticmethod
    async def login(db: AsyncSession, data: UserLogin) -> TokenResponse:
        user = await UserRepository.get_by_email(db, data.email)
        if not user or not AuthService._verify_password(data.password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is disabled",
            )
        return TokenResponse(
            access_token=AuthService.issue_token(user),
            user=UserResponse.model_validate(user),
        )

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: str) -> User:
        user = await UserRepository.get_by_id(db, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    async def update_profile(db: AsyncSession, user_id: str, data: ProfileUpdate) -> User:
        user = await AuthService.get_user_by_id(db, user_id)
        if data.name is not None:
            user.name = data.name
        if data.image is not None:
            user.image = data.image
        return await UserRepository.save(db, user)
