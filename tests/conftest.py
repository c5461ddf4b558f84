import io
import os
import tempfile

# configuration is read at import time, so it has to be in place first
_TMP = tempfile.mkdtemp(prefix="streamhub-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP, 'unused.db')}"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["APP_ENV"] = "development"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["PAYMENT_DELAY_SECONDS"] = "0"
os.environ["OTP_RATE_LIMIT"] = "1000/minute"
os.environ["LOGIN_RATE_LIMIT"] = "1000/minute"
os.environ["PAYMENT_RATE_LIMIT"] = "1000/minute"
os.environ.pop("SMS_GATEWAY_URL", None)
os.environ.pop("SMTP_HOST", None)

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from streamhub.database import Base, get_async_session
from streamhub.main import app
from streamhub.models.user_model import User, UserProfile, UserRole
from streamhub.models.video_model import Video, VideoCategory, VideoLanguage
from streamhub.utils.clock import utcnow
from streamhub.utils.token_utils import create_access_token


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
async def client(session_factory):
    async def override_session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_async_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def make_user(session, role=UserRole.USER, email=None, phone=None, name=None, profiles=1):
    user = User(email=email, phone=phone, name=name, role=role.value, is_verified=True)
    for i in range(profiles):
        user.profiles.append(UserProfile(name=f"Profile {i + 1}"))
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def make_video(session, creator, title="Nagpuri Love Story", approved=True, **overrides):
    fields = dict(
        title=title,
        description=f"{title} description",
        thumbnail="/uploads/thumb.png",
        video_url="/uploads/video.mp4",
        duration=5400,
        category=VideoCategory.MOVIE,
        language=VideoLanguage.NAGPURI,
        release_year=2024,
        created_by=creator.id,
        is_public=approved,
        approved_at=utcnow() if approved else None,
    )
    fields.update(overrides)
    video = Video(**fields)
    session.add(video)
    await session.commit()
    await session.refresh(video)
    return video


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def png_bytes(size=(64, 36)):
    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()
