import json
import os
from typing import AsyncGenerator, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

# Local overrides for test runs (e.g. LOG_LEVEL=DEBUG)
from dotenv import load_dotenv

env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)

from libs.common.config import Settings, get_settings  # noqa: E402
from services.store_service.app.main import create_app  # noqa: E402

get_settings.cache_clear()


class FakePaystackGateway:
    """
    In-memory stand-in for the Paystack API, plugged into ``PaystackClient``
    through ``httpx.MockTransport``.

    Defaults: initialize succeeds with a checkout URL, verify reports the
    transaction as paid for the amount it was initialized with. Tests flip the
    attributes below to script failures.
    """

    CHECKOUT_URL = "https://checkout.paystack.com/"

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.initialized: dict[str, dict] = {}
        self.initialize_status_code = 200
        self.initialize_body: Optional[dict] = None
        self.verify_status: str = "success"
        self.verify_gateway_response: str = "Successful"
        self.verify_amount_override: Optional[int] = None
        self.verify_status_code = 200
        self.network_error = False
        self.transport = httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.network_error:
            raise httpx.ConnectError("gateway unreachable", request=request)

        if request.url.path == "/transaction/initialize":
            payload = json.loads(request.content)
            self.initialized[payload["reference"]] = payload
            if self.initialize_body is not None:
                return httpx.Response(self.initialize_status_code, json=self.initialize_body)
            return httpx.Response(
                self.initialize_status_code,
                json={
                    "status": True,
                    "message": "Authorization URL created",
                    "data": {
                        "authorization_url": f"{self.CHECKOUT_URL}{payload['reference']}",
                        "access_code": "ac_test",
                        "reference": payload["reference"],
                    },
                },
            )

        if request.url.path.startswith("/transaction/verify/"):
            reference = request.url.path.rsplit("/", 1)[-1]
            if self.verify_status_code != 200:
                return httpx.Response(
                    self.verify_status_code,
                    json={"status": False, "message": "Transaction reference not found"},
                )
            initialized = self.initialized.get(reference, {})
            amount = self.verify_amount_override
            if amount is None:
                amount = initialized.get("amount")
            return httpx.Response(
                200,
                json={
                    "status": True,
                    "message": "Verification successful",
                    "data": {
                        "reference": reference,
                        "status": self.verify_status,
                        "gateway_response": self.verify_gateway_response,
                        "amount": amount,
                        "paid_at": "2026-01-01T00:00:00.000Z",
                    },
                },
            )

        return httpx.Response(404, json={"status": False, "message": "Not found"})

    @property
    def initialize_calls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/transaction/initialize"]


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """
    Settings for an isolated app: fresh SQLite file per test, fixed secrets.
    """
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "WARNING"),
        BASE_URL="http://test",
        SESSION_SECRET="test-session-secret",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'store.sqlite'}",
        PAYSTACK_SECRET_KEY="sk_test_fake",
        PAYSTACK_API_BASE_URL="https://api.paystack.test",
        SEED_ON_STARTUP=False,
    )


@pytest.fixture
def paystack_gateway() -> FakePaystackGateway:
    return FakePaystackGateway()


@pytest_asyncio.fixture
async def app(test_settings, paystack_gateway):
    """
    Build the app and run its lifespan (table creation) around the test.
    """
    application = create_app(
        test_settings, paystack_transport=paystack_gateway.transport
    )
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def db_session(app) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session on the same database the app under test uses.
    """
    async with app.state.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient bound to the app. Its cookie jar carries the session.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


async def _create_user(db_session, *, is_admin: bool, password: str):
    from tests.factories import UserFactory

    user = UserFactory.create(is_admin=is_admin, password_plain=password)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def _login(client: AsyncClient, email: str, password: str) -> None:
    response = await client.post("/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text


@pytest_asyncio.fixture
async def customer(db_session):
    return await _create_user(db_session, is_admin=False, password="secret123")


@pytest_asyncio.fixture
async def customer_client(client, customer) -> AsyncClient:
    """
    The default client, logged in as a regular customer.
    """
    await _login(client, customer.email, "secret123")
    return client


@pytest_asyncio.fixture
async def admin_client(client, db_session) -> AsyncClient:
    """
    The default client, logged in as an admin.
    """
    admin = await _create_user(db_session, is_admin=True, password="admin123")
    await _login(client, admin.email, "admin123")
    return client

