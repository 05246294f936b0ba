import os
import uuid
import asyncio
import tempfile

import pytest
from fastapi.testclient import TestClient

_TMP = tempfile.mkdtemp(prefix="vidtube-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["MEDIA_DIR"] = os.path.join(_TMP, "media")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("REFRESH_SECRET_KEY", "test-refresh-secret-key")
os.environ["DB_AUTO_CREATE"] = "true"

from sqlalchemy import func, select  # noqa: E402

from vidtube.db.session import AsyncSessionLocal  # noqa: E402
from vidtube.main import app  # noqa: E402

API = "/api/v1"

VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(client: TestClient):
    """Registra y loguea un usuario nuevo; devuelve id, username y headers."""

    def _make(password: str = "secret123"):
        username = f"u{uuid.uuid4().hex[:10]}"
        r = client.post(
            f"{API}/users/register",
            data={
                "fullName": f"User {username}",
                "username": username,
                "email": f"{username}@example.com",
                "password": password,
            },
        )
        assert r.status_code == 201, r.text
        user = r.json()["data"]

        r = client.post(f"{API}/users/login", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        data = r.json()["data"]
        # las cookies del login no deben filtrarse a la siguiente petición
        client.cookies.clear()
        return {
            "id": user["id"],
            "username": username,
            "email": user["email"],
            "password": password,
            "access": data["accessToken"],
            "refresh": data["refreshToken"],
            "headers": {"Authorization": f"Bearer {data['accessToken']}"},
        }

    return _make


@pytest.fixture
def make_video(client: TestClient):
    def _make(headers: dict, title: str = "My video", description: str = "desc") -> dict:
        r = client.post(
            f"{API}/videos/publish",
            headers=headers,
            data={"title": title, "description": description},
            files={
                "videoFile": ("clip.mp4", VIDEO_BYTES, "video/mp4"),
                "thumbnail": ("thumb.png", PNG_BYTES, "image/png"),
            },
        )
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make


@pytest.fixture
def db_count():
    """COUNT(*) directo a la base: model + filtros por columna."""

    def _count(model, **filters) -> int:
        async def _run():
            async with AsyncSessionLocal() as db:
                stmt = select(func.count()).select_from(model)
                for field, value in filters.items():
                    stmt = stmt.where(getattr(model, field) == value)
                res = await db.execute(stmt)
                return int(res.scalar_one())

        return asyncio.run(_run())

    return _count
