import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog.dependencies.auth import create_access_token, get_current_user
from blog.dependencies.mysql import get_session
from blog.models.mixin import kst_now
from blog.models.user import User, UserRole
from blog.schemas import LoginRequest, LoginResponse, SignUpRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/sign-up", response_model=UserResponse)
async def sign_up(
    body: SignUpRequest,
    session: AsyncSession = Depends(get_session),
) -> User:
    user = User(
        username=body.username,
        full_name=body.full_name,
        email=body.email,
        role=UserRole.user,
    )
    user.set_password(body.password)
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise HTTPException(
            status_code=409, detail="이미 사용 중인 사용자명 또는 이메일입니다."
        ) from e
    await session.refresh(user)
    logger.info("회원 가입 완료: %s", user.username)
    return user


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> LoginResponse:
    user = await session.scalar(select(User).where(User.username == body.username))
    if user is None or not user.verify_password(body.password):
        raise HTTPException(status_code=401, detail="Invalid username or password")

    user.last_login = kst_now()
    await session.commit()

    token = create_access_token(user)
    return LoginResponse(access_token=token)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)) -> User:
    return current_user
