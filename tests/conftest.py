import httpx
import pytest
from asgi_lifespan import LifespanManager
from botocore.exceptions import ClientError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.models import models  # noqa: F401  registers tables on Base
from app.core.config import settings
from app.core.db import Base, get_session
from app.main import app
from app.services.mux.client import MuxError, get_mux_client
from app.storage.b2 import get_storage
from workers import tasks as worker_tasks

API_BASE = "http://test"


class DummyS3:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.puts = []
        self.presigned = []

    def put_object(self, Bucket, Key, Body, ContentType):
        if self.error:
            raise self.error
        self.puts.append({"Bucket": Bucket, "Key": Key, "Body": Body, "ContentType": ContentType})
        return {"ETag": '"etag"'}

    def generate_presigned_url(self, op, Params, ExpiresIn):
        if self.error:
            raise self.error
        self.presigned.append((op, Params, ExpiresIn))
        return f"https://presigned/{Params['Bucket']}/{Params['Key']}?signature=dummy"


class FakeMux:
    def __init__(self, create_response=None, assets=None, error: Exception | None = None):
        self.create_response = create_response if create_response is not None else {
            "data": {"id": "asset-1", "status": "preparing", "playback_ids": [{"id": "pb-1", "policy": "public"}]}
        }
        self.assets = assets or {}
        self.error = error
        self.created = []

    async def create_asset(self, input_url):
        if self.error:
            raise self.error
        self.created.append(input_url)
        return self.create_response

    async def get_asset(self, asset_id):
        if self.error:
            raise self.error
        if asset_id not in self.assets:
            raise MuxError("not found", status_code=404)
        return {"data": self.assets[asset_id]}


class BrokenSession:
    def add(self, obj):
        pass

    async def execute(self, *args, **kwargs):
        raise SQLAlchemyError("database unavailable")

    async def commit(self):
        raise SQLAlchemyError("database unavailable")

    async def rollback(self):
        pass


def client_error(code="AccessDenied", message="denied", op="PutObject"):
    return ClientError({"Error": {"Code": code, "Message": message}}, op)


@pytest.fixture(autouse=True)
def b2_settings(monkeypatch):
    monkeypatch.setattr(settings, "B2_BUCKET_NAME", "bucket")
    monkeypatch.setattr(settings, "B2_PUBLIC_URL", "https://cdn.example.com")
    monkeypatch.setattr(settings, "B2_S3_ENDPOINT", "https://s3.eu-central-003.backblazeb2.com")
    monkeypatch.setattr(settings, "NOTIFY_PROVIDER", "log")


@pytest.fixture(autouse=True)
def scheduled_polls(monkeypatch):
    calls = []

    def apply_async(args=None, kwargs=None, **options):
        calls.append({"args": args, "options": options})

    monkeypatch.setattr(worker_tasks.refresh_asset_status, "apply_async", apply_async)
    return calls


@pytest.fixture
async def session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    maker = async_sessionmaker(engine, expire_on_commit=False)

    async def override_session():
        async with maker() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    yield maker
    app.dependency_overrides.pop(get_session, None)
    await engine.dispose()


@pytest.fixture
def storage():
    dummy = DummyS3()
    app.dependency_overrides[get_storage] = lambda: dummy
    yield dummy
    app.dependency_overrides.pop(get_storage, None)


@pytest.fixture
def mux():
    fake = FakeMux()
    app.dependency_overrides[get_mux_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_mux_client, None)


@pytest.fixture
async def client(session_maker):
    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=API_BASE) as ac:
            yield ac
