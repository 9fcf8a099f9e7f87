import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from blog.config.config import settings
from blog.dependencies.mysql import get_session
from blog.models.user import User

logger = logging.getLogger(__name__)


def create_access_token(user: User) -> str:
    """
    로그인한 사용자의 JWT 액세스 토큰을 생성합니다.
    sub에는 user.id를 문자열로 담습니다.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "role": str(user.role),
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt.expire_minutes),
    }
    return jwt.encode(
        payload, settings.jwt.secret_key, algorithm=settings.jwt.algorithm
    )


def _bearer_token(authorization: str) -> str:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=401, detail="Invalid authorization header format"
        )
    return token.strip()


def _user_id_from_token(token: str) -> int:
    try:
        payload = jwt.decode(
            token,
            settings.jwt.secret_key,
            algorithms=[settings.jwt.algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(status_code=401, detail="Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail="Invalid token") from e

    try:
        return int(payload["sub"])
    except ValueError as e:
        raise HTTPException(status_code=401, detail="Invalid token payload") from e


async def get_current_user(
    authorization: str = Header(...),
    session: AsyncSession = Depends(get_session),
) -> User:
    """Authorization 헤더의 Bearer 토큰으로 현재 사용자를 조회합니다."""
    user_id = _user_id_from_token(_bearer_token(authorization))

    user = await session.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    게시글 관리 API는 관리자만 사용할 수 있습니다.
    권한은 토큰이 아닌 DB의 현재 role 기준으로 판단합니다.
    """
    if not current_user.is_admin:
        logger.info("관리자 전용 API 접근 거부: user_id=%d", current_user.id)
        raise HTTPException(status_code=403, detail="관리자만 접근할 수 있습니다.")
    return current_user
