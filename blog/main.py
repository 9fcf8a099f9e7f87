import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from blog.config.config import settings
from blog.dependencies import mysql
from blog.exception_handler import custom_exception_handler
from blog.models.user import User, UserRole
from blog.routers import admin, comment, post, tag, user

# 모든 모델을 import하여 Base.metadata에 등록
import blog.models.post  # noqa: F401

# logger 전역 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)


async def _create_master_admin() -> None:
    """마스터 admin 계정이 없을 경우 자동 생성합니다."""
    async with mysql.async_session() as session:
        existing = await session.scalar(
            select(User).where(User.username == settings.admin.username)
        )
        if existing is None:
            admin_user = User(
                username=settings.admin.username,
                full_name=settings.admin.full_name,
                email=settings.admin.email,
                role=UserRole.admin,
            )
            admin_user.set_password(settings.admin.password)
            session.add(admin_user)
            await session.commit()
            logger.info("마스터 관리자 계정 생성 완료: %s", settings.admin.username)
        else:
            logger.info(
                "마스터 관리자 계정이 이미 존재합니다: %s", settings.admin.username
            )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    await mysql.startup()
    await _create_master_admin()
    yield
    await mysql.shutdown()


app = FastAPI(lifespan=lifespan)
app.add_exception_handler(HTTPException, custom_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(user.router)
app.include_router(post.router)
app.include_router(comment.router)
app.include_router(tag.router)
app.include_router(admin.router)


@app.get(
    "/health",
    tags=["Health Check"],
    summary="Health Check용 API",
)
async def health_check() -> str:
    return "ok"
