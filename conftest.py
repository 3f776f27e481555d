import asyncio
import base64
import os
import tempfile

# Settings are read at import time, so the environment must be set first.
_DB_DIR = tempfile.mkdtemp(prefix="catalog-api-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "s3cret-pass"
os.environ["CRON_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["IMAGE_STORE"] = "local"
os.environ["UPLOAD_DIR"] = os.path.join(_DB_DIR, "uploads")
for _key in ("CRON_SCHEDULE", "CRON_URL", "CRON_METHOD", "CRON_TIMEOUT", "CRON_OVERLAP_POLICY"):
    os.environ.pop(_key, None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from catalog_api.clients.http_client import HttpClient, HttpResponse  # noqa: E402
from catalog_api.config import Settings  # noqa: E402
from catalog_api.database import SessionLocal  # noqa: E402
from catalog_api.dependencies import get_cron_service, get_image_store  # noqa: E402
from catalog_api.errors import ImageStoreError  # noqa: E402
from catalog_api.repositories.image_store import ImageStore  # noqa: E402
from catalog_api.models.product import Product  # noqa: E402
from catalog_api.services.cron_service import CronService  # noqa: E402
from catalog_api.services.cron_trigger import CronHandle, CronTrigger  # noqa: E402


class FakeHandle(CronHandle):
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeTrigger(CronTrigger):
    """Records registrations; ``fire()`` runs the active callback on demand."""

    def __init__(self):
        self.registrations = []
        self.closed = False

    def schedule(self, expr, callback):
        handle = FakeHandle()
        self.registrations.append((expr, callback, handle))
        return handle

    async def aclose(self):
        self.closed = True

    @property
    def active(self):
        return [r for r in self.registrations if not r[2].cancelled]

    def fire(self, times=1):
        (_, callback, _), = self.active
        for _ in range(times):
            asyncio.run(callback())


class FakeHttpClient(HttpClient):
    """Plays back queued outcomes: an HttpResponse, an exception to raise, or an
    asyncio.Event to wait on before answering 200. Defaults to 200 "ok"."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def request(self, method, url, headers=None, timeout_ms=30000):
        self.calls.append({"method": method, "url": url, "headers": headers, "timeout_ms": timeout_ms})
        outcome = self.outcomes.pop(0) if self.outcomes else HttpResponse(200, text="ok")
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, asyncio.Event):
            await outcome.wait()
            return HttpResponse(200, text="released")
        return outcome


class FakeImageStore(ImageStore):
    """Keeps uploads in memory. ``fail_on`` makes the n-th upload (1-based) fail."""

    PREFIX = "https://images.test/store_products/"

    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.uploaded = {}
        self.deleted = []

    async def upload(self, image):
        if self.fail_on is not None and len(self.uploaded) + 1 == self.fail_on:
            raise ImageStoreError("host unavailable")
        url = f"{self.PREFIX}{len(self.uploaded) + 1}-{image.filename}"
        self.uploaded[url] = image
        return url

    def owns(self, url):
        return url.startswith(self.PREFIX)

    async def delete(self, url):
        self.deleted.append(url)


def make_settings(**overrides) -> Settings:
    values = {
        "SERVER_PORT": 5000,
        "CRON_ENABLED": False,
        "CRON_SCHEDULE": None,
        "CRON_URL": None,
        "CRON_METHOD": None,
        "CRON_TIMEOUT": None,
        "CRON_OVERLAP_POLICY": "allow",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def trigger():
    return FakeTrigger()


@pytest.fixture
def http():
    return FakeHttpClient()


@pytest.fixture
def cron(trigger, http):
    return CronService(make_settings(), trigger, http)


@pytest.fixture
def make_cron():
    """Factory: ``make_cron(*outcomes, **settings)`` -> (service, trigger, http)."""

    def _make(*outcomes, **settings_overrides):
        trigger = FakeTrigger()
        http = FakeHttpClient(*outcomes)
        return CronService(make_settings(**settings_overrides), trigger, http), trigger, http

    return _make


@pytest.fixture
def image_store():
    return FakeImageStore()


@pytest.fixture
def client(image_store):
    from main import app

    app.dependency_overrides[get_image_store] = lambda: image_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    db = SessionLocal()
    try:
        db.query(Product).delete()
        db.commit()
    finally:
        db.close()


@pytest.fixture
def cron_client(client, cron):
    """API client whose /cron endpoints drive the fake-backed ``cron`` fixture."""
    client.app.dependency_overrides[get_cron_service] = lambda: cron
    return client


@pytest.fixture
def auth_headers():
    token = base64.b64encode(b"admin:s3cret-pass").decode("ascii")
    return {"Authorization": f"Basic {token}"}
