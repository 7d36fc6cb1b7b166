"""
Test configuration and fixtures
"""

import os

# Cheap hashes for the test run; must be set before settings are imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import AsyncGenerator, List, Optional
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from videotube.core.exceptions import EmailDeliveryError
from videotube.core.security import create_access_token, get_password_hash
from videotube.db import database
from videotube.db.database import Base, get_db
from videotube.main import app
from videotube.models.comment import Comment
from videotube.models.like import Like
from videotube.models.post import Post
from videotube.models.user import User
from videotube.models.video import Video
from videotube.services.email_service import get_email_service
from videotube.services.storage_service import StoredMedia, get_storage_service

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "Str0ng!Pass"


class FakeStorage:
    """Records uploads and deletions instead of touching the object store"""

    def __init__(self):
        self.uploaded: List[str] = []
        self.deleted: List[str] = []

    async def upload(self, file, folder: str, kind: str = "image") -> StoredMedia:
        key = f"{folder}/{uuid4().hex}"
        self.uploaded.append(key)
        return StoredMedia(
            url=f"https://cdn.videotube.test/{key}",
            public_id=key,
            duration=42 if kind == "video" else 0,
        )

    async def delete(self, public_id: Optional[str]) -> bool:
        if not public_id:
            return False
        self.deleted.append(public_id)
        return True

    async def delete_many(self, public_ids) -> int:
        deleted = 0
        for public_id in public_ids:
            if await self.delete(public_id):
                deleted += 1
        return deleted


class FakeMailer:
    """Captures outgoing mail; set ``fail`` to simulate a delivery error"""

    def __init__(self):
        self.verification_emails = []
        self.reset_emails = []
        self.fail = False

    async def send_verification_email(self, email: str, name: str, token: str) -> None:
        if self.fail:
            raise EmailDeliveryError(recipient=email)
        self.verification_emails.append({"email": email, "name": name, "token": token})

    async def send_password_reset_email(self, email: str, name: str, reset_url: str) -> None:
        if self.fail:
            raise EmailDeliveryError(recipient=email)
        self.reset_emails.append({"email": email, "name": name, "reset_url": reset_url})


@pytest.fixture
async def test_engine():
    """In-memory database shared by every session of a test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine, monkeypatch):
    factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    # Side-effect sessions (notifications, jobs) open their own session from the module factory
    monkeypatch.setattr(database, "async_session_factory", factory)
    return factory


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session used by tests to arrange data"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def fake_mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
async def client(session_factory, fake_storage, fake_mailer) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database, storage and email overrides"""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: fake_storage
    app.dependency_overrides[get_email_service] = lambda: fake_mailer

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://localhost") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def count_rows(session_factory):
    """Count rows of a model matching the given criteria, in a fresh session"""

    async def _count(model, *criteria) -> int:
        async with session_factory() as session:
            result = await session.execute(select(func.count()).select_from(model).where(*criteria))
            return result.scalar_one()

    return _count


@pytest.fixture
def make_user(test_db: AsyncSession):
    """Factory creating verified accounts"""

    async def _make_user(username: str, full_name: Optional[str] = None, verified: bool = True) -> User:
        user = User(
            username=username,
            email=f"{username}@mail.com",
            hashed_password=get_password_hash(TEST_PASSWORD),
            full_name=full_name or username.title(),
            avatar_url=f"https://cdn.videotube.test/avatars/{username}.png",
            avatar_public_id=f"avatars/{username}.png",
            is_email_verified=verified,
        )
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_video(test_db: AsyncSession):
    """Factory creating published videos"""

    async def _make_video(
        owner: User,
        title: str = "Test video",
        views: int = 0,
        is_published: bool = True
    ) -> Video:
        key = uuid4().hex
        video = Video(
            owner_id=owner.id,
            title=title,
            description=f"About {title}",
            video_url=f"https://cdn.videotube.test/videos/{key}.mp4",
            video_public_id=f"videos/{key}.mp4",
            thumbnail_url=f"https://cdn.videotube.test/thumbnails/{key}.png",
            thumbnail_public_id=f"thumbnails/{key}.png",
            duration=60,
            views=views,
            is_published=is_published,
        )
        test_db.add(video)
        await test_db.commit()
        await test_db.refresh(video)
        return video

    return _make_video


@pytest.fixture
def make_post(test_db: AsyncSession):

    async def _make_post(owner: User, content: str = "Hello subscribers") -> Post:
        post = Post(owner_id=owner.id, content=content)
        test_db.add(post)
        await test_db.commit()
        await test_db.refresh(post)
        return post

    return _make_post


@pytest.fixture
def make_comment(test_db: AsyncSession):

    async def _make_comment(owner: User, content: str = "Nice one", video=None, post=None) -> Comment:
        comment = Comment(
            owner_id=owner.id,
            content=content,
            video_id=video.id if video else None,
            post_id=post.id if post else None,
        )
        test_db.add(comment)
        await test_db.commit()
        await test_db.refresh(comment)
        return comment

    return _make_comment


@pytest.fixture
def make_like(test_db: AsyncSession):

    async def _make_like(user: User, video=None, comment=None, post=None) -> Like:
        like = Like(
            liked_by_id=user.id,
            video_id=video.id if video else None,
            comment_id=comment.id if comment else None,
            post_id=post.id if post else None,
        )
        test_db.add(like)
        await test_db.commit()
        return like

    return _make_like


def auth_headers(user: User) -> dict:
    """Bearer header for the given account"""
    token = create_access_token(data={"sub": str(user.id), "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    return auth_headers
