import httpx


class TestSignUp:
    async def test_success(self, api_client: httpx.AsyncClient):
        response = await api_client.post(
            "/users/sign-up",
            json={
                "username": "new_user",
                "full_name": "New User",
                "email": "new_user@test.com",
                "password": "password123",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "new_user"
        assert data["full_name"] == "New User"
        assert data["email"] == "new_user@test.com"
        assert data["role"] == "user"
        assert "id" in data
        assert "hashed_password" not in data

    async def test_duplicate_username(self, api_client: httpx.AsyncClient):
        await api_client.post(
            "/users/sign-up",
            json={
                "username": "dup",
                "full_name": "Dup One",
                "email": "dup1@test.com",
                "password": "password",
            },
        )
        response = await api_client.post(
            "/users/sign-up",
            json={
                "username": "dup",
                "full_name": "Dup Two",
                "email": "dup2@test.com",
                "password": "password",
            },
        )
        assert response.status_code == 409
        assert "message" in response.json()

    async def test_invalid_username(self, api_client: httpx.AsyncClient):
        """사용자명은 소문자와 '_'만 허용합니다."""
        response = await api_client.post(
            "/users/sign-up",
            json={
                "username": "NotAllowed1",
                "full_name": "Someone",
                "email": "someone@test.com",
                "password": "password",
            },
        )
        assert response.status_code == 422

    async def test_short_password(self, api_client: httpx.AsyncClient):
        response = await api_client.post(
            "/users/sign-up",
            json={
                "username": "someone",
                "full_name": "Someone",
                "email": "someone@test.com",
                "password": "12345",
            },
        )
        assert response.status_code == 422

    async def test_blank_full_name(self, api_client: httpx.AsyncClient):
        response = await api_client.post(
            "/users/sign-up",
            json={
                "username": "someone",
                "full_name": "   ",
                "email": "someone@test.com",
                "password": "password",
            },
        )
        assert response.status_code == 422

    async def test_invalid_email(self, api_client: httpx.AsyncClient):
        response = await api_client.post(
            "/users/sign-up",
            json={
                "username": "someone",
                "full_name": "Someone",
                "email": "not-an-email",
                "password": "password",
            },
        )
        assert response.status_code == 422


class TestLogin:
    async def test_success(self, api_client: httpx.AsyncClient, member: dict):
        response = await api_client.post(
            "/users/login",
            json={"username": "test_member", "password": "password123"},
        )
        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"

    async def test_wrong_password(self, api_client: httpx.AsyncClient, member: dict):
        response = await api_client.post(
            "/users/login",
            json={"username": "test_member", "password": "wrong"},
        )
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid username or password"}

    async def test_unknown_user(self, api_client: httpx.AsyncClient):
        response = await api_client.post(
            "/users/login",
            json={"username": "nobody", "password": "password"},
        )
        assert response.status_code == 401


class TestMe:
    async def test_success(self, api_client: httpx.AsyncClient, member: dict):
        response = await api_client.get("/users/me", headers=member["headers"])
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == member["id"]
        assert data["username"] == "test_member"
        assert data["last_login"] is not None

    async def test_unauthenticated(self, api_client: httpx.AsyncClient):
        response = await api_client.get("/users/me")
        assert response.status_code == 422

    async def test_invalid_token(self, api_client: httpx.AsyncClient):
        response = await api_client.get(
            "/users/me", headers={"Authorization": "Bearer invalid.token.value"}
        )
        assert response.status_code == 401

    async def test_wrong_scheme(self, api_client: httpx.AsyncClient):
        response = await api_client.get(
            "/users/me", headers={"Authorization": "Basic somevalue"}
        )
        assert response.status_code == 401

    async def test_token_claims(self, api_client: httpx.AsyncClient, member: dict):
        """토큰의 sub에는 사용자 id가, role에는 권한이 들어갑니다."""
        import jwt

        from blog.config.config import settings

        token = member["headers"]["Authorization"].removeprefix("Bearer ")
        payload = jwt.decode(
            token, settings.jwt.secret_key, algorithms=[settings.jwt.algorithm]
        )
        assert payload["sub"] == str(member["id"])
        assert payload["username"] == "test_member"
        assert payload["role"] == "user"

    async def test_deleted_user(self, api_client: httpx.AsyncClient, member: dict):
        from sqlalchemy import delete

        from blog.dependencies.mysql import async_session
        from blog.models.user import User

        async with async_session() as session:
            await session.execute(delete(User).where(User.id == member["id"]))
            await session.commit()

        response = await api_client.get("/users/me", headers=member["headers"])
        assert response.status_code == 401
        assert response.json() == {"message": "User not found"}
