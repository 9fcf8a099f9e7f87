import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator

import httpx
import pytest
from asgi_lifespan import LifespanManager

# blog.config.config 가 import 되기 전에 설정해야 함
_TEST_DB = Path(tempfile.gettempdir()) / "blog_test.db"
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TEST_DB}")
os.environ.setdefault("JWT__SECRET_KEY", "test-secret-key-for-blog-api-0123456789")
os.environ.setdefault("ADMIN__USERNAME", "admin")
os.environ.setdefault("ADMIN__EMAIL", "admin@test.com")
os.environ.setdefault("ADMIN__PASSWORD", "admin_password")


@pytest.fixture
async def test_client(init_db) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    lifespan(스키마 검증, 테이블 생성, 마스터 관리자 생성)까지 실행한 클라이언트.
    """
    from blog.main import app

    async with (
        httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test",
        ) as client,
        LifespanManager(app),
    ):
        yield client


@pytest.fixture(scope="session")
async def init_db():
    """
    세션 단위로 테이블을 생성합니다.
    DATABASE_URL이 가리키는 SQLite 파일을 사용합니다.
    """
    import blog.models.post  # noqa: F401
    from blog.dependencies.mysql import Base, engine, shutdown as db_shutdown

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await db_shutdown()


@pytest.fixture
async def api_client(init_db) -> httpx.AsyncClient:
    """
    DB와 연결된 테스트 클라이언트.
    테스트 시작 전 마스터 관리자 계정을 생성하고,
    테스트 종료 후 모든 데이터를 삭제합니다.
    """
    from blog.dependencies.mysql import Base, async_session
    from blog.main import _create_master_admin, app

    await _create_master_admin()

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    async with async_session() as session:
        for table in reversed(Base.metadata.sorted_tables):
            await session.execute(table.delete())
        await session.commit()


@pytest.fixture
async def admin(api_client: httpx.AsyncClient) -> dict:
    """마스터 관리자로 로그인하고 {id, headers} 를 반환합니다."""
    from blog.config.config import settings

    response = await api_client.post(
        "/users/login",
        json={
            "username": settings.admin.username,
            "password": settings.admin.password,
        },
    )
    assert response.status_code == 200
    headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

    me = await api_client.get("/users/me", headers=headers)
    assert me.status_code == 200
    return {"id": me.json()["id"], "headers": headers}


@pytest.fixture
async def admin_headers(admin: dict) -> dict:
    return admin["headers"]


@pytest.fixture
async def other_admin(api_client: httpx.AsyncClient) -> dict:
    """글 작성자가 아닌 두 번째 관리자를 DB에 직접 생성합니다."""
    from blog.dependencies.auth import create_access_token
    from blog.dependencies.mysql import async_session
    from blog.models.user import User, UserRole

    async with async_session() as session:
        user = User(
            username="other_admin",
            full_name="Other Admin",
            email="other_admin@test.com",
            role=UserRole.admin,
        )
        user.set_password("password123")
        session.add(user)
        await session.commit()
        user_id = user.id
        token = create_access_token(user)

    return {"id": user_id, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
async def member(api_client: httpx.AsyncClient) -> dict:
    """
    일반 회원을 생성하고 {id, headers} 를 반환합니다.
    """
    sign_up = await api_client.post(
        "/users/sign-up",
        json={
            "username": "test_member",
            "full_name": "Test Member",
            "email": "member@test.com",
            "password": "password123",
        },
    )
    assert sign_up.status_code == 200
    user_id = sign_up.json()["id"]

    login = await api_client.post(
        "/users/login",
        json={"username": "test_member", "password": "password123"},
    )
    assert login.status_code == 200
    token = login.json()["access_token"]
    return {"id": user_id, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
async def member_headers(member: dict) -> dict:
    return member["headers"]


@pytest.fixture
async def post(api_client: httpx.AsyncClient, admin_headers: dict) -> dict:
    """관리자 API로 테스트용 게시글을 작성합니다."""
    response = await api_client.post(
        "/admin/posts",
        json={
            "title": "Hello World",
            "summary": "첫 번째 게시글 요약",
            "content": "첫 번째 게시글의 본문입니다.",
            "tags": ["python", "fastapi"],
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    return response.json()
