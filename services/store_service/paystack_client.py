"""
Paystack API client for hosted-checkout transactions.

Provides async methods for:
- Initializing a transaction (returns the hosted checkout URL)
- Verifying a transaction by reference
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

import httpx
from fastapi import Request
from libs.common.config import Settings

logger = logging.getLogger(__name__)

PAYSTACK_BASE_URL = "https://api.paystack.co"


@dataclass
class InitializedTransaction:
    """Result of initializing a transaction."""

    authorization_url: Optional[str]
    access_code: Optional[str]
    reference: str


@dataclass
class VerifiedTransaction:
    """Result of verifying a transaction."""

    reference: str
    status: str  # success, failed, abandoned, ongoing, pending, reversed
    gateway_response: Optional[str]
    amount: Optional[int]  # minor units
    paid_at: Optional[str]

    @property
    def is_successful(self) -> bool:
        return self.status == "success" or self.gateway_response == "Successful"


class PaystackError(Exception):
    """Base exception for Paystack API errors."""

    def __init__(
        self, message: str, status_code: int = None, response_data: dict = None
    ):
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(message)


class PaystackClient:
    """Async client for the Paystack Transaction API.

    ``transport`` is passed straight to ``httpx.AsyncClient``; tests use it to
    plug in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        secret_key: str = "",
        base_url: str = PAYSTACK_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        # An empty key is allowed: Paystack rejects the calls as unauthorized.
        self.secret_key = secret_key or ""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self._headers = {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "PaystackClient":
        return cls(
            secret_key=settings.PAYSTACK_SECRET_KEY,
            base_url=settings.PAYSTACK_API_BASE_URL,
            timeout=settings.PAYSTACK_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict = None,
        json_data: dict = None,
    ) -> dict:
        """Make an async request to Paystack API.

        Raises:
            PaystackError: non-2xx response or ``status: false`` body
            httpx.HTTPError: network failure
        """
        url = f"{self.base_url}{endpoint}"

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            response = await client.request(
                method=method,
                url=url,
                headers=self._headers,
                params=params,
                json=json_data,
            )

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.is_success:
            logger.error(f"Paystack API error: {response.status_code} - {data}")
            raise PaystackError(
                message=data.get("message", "Unknown Paystack error"),
                status_code=response.status_code,
                response_data=data,
            )

        if not data.get("status"):
            raise PaystackError(
                message=data.get("message", "Paystack request failed"),
                status_code=response.status_code,
                response_data=data,
            )

        return data

    async def initialize_transaction(
        self,
        email: str,
        amount: int,
        reference: str,
        callback_url: str,
    ) -> InitializedTransaction:
        """
        Start a hosted checkout.

        Args:
            email: Customer email
            amount: Amount in minor units (kobo/cents)
            reference: Our unique payment reference
            callback_url: Where Paystack sends the browser afterwards

        Returns:
            InitializedTransaction with the authorization_url to redirect to
        """
        data = await self._request(
            "POST",
            "/transaction/initialize",
            json_data={
                "email": email,
                "amount": amount,
                "reference": reference,
                "callback_url": callback_url,
            },
        )

        transaction = _transaction_data(data)
        return InitializedTransaction(
            authorization_url=transaction.get("authorization_url"),
            access_code=transaction.get("access_code"),
            reference=transaction.get("reference", reference),
        )

    async def verify_transaction(self, reference: str) -> VerifiedTransaction:
        """
        Check the outcome of a transaction by reference.
        """
        data = await self._request(
            "GET", f"/transaction/verify/{quote(reference, safe='')}"
        )

        transaction = _transaction_data(data)
        amount = transaction.get("amount")
        return VerifiedTransaction(
            reference=transaction.get("reference", reference),
            status=str(transaction.get("status") or "").lower(),
            gateway_response=transaction.get("gateway_response"),
            amount=int(amount) if amount is not None else None,
            paid_at=transaction.get("paid_at"),
        )


def _transaction_data(data: dict[str, Any]) -> dict[str, Any]:
    """The ``data`` object of a Paystack reply, or an empty dict if it is not one."""
    transaction = data.get("data")
    return transaction if isinstance(transaction, dict) else {}


def get_paystack_client(request: Request) -> PaystackClient:
    """FastAPI dependency returning the app's PaystackClient."""
    return request.app.state.paystack
