"""Unit tests for settings parsing and the structured log formatter."""

import json
import logging

import pytest
from libs.common.config import Settings
from libs.common.logging import (
    JsonFormatter,
    RequestContextFilter,
    clear_request_context,
    get_request_id,
    set_request_context,
)


class TestSettings:
    """Settings defaults and normalisation."""

    @pytest.mark.unit
    def test_plain_sqlite_url_gets_async_driver(self):
        settings = Settings(_env_file=None, DATABASE_URL="sqlite:///./data/shop.sqlite")
        assert settings.DATABASE_URL == "sqlite+aiosqlite:///./data/shop.sqlite"

    @pytest.mark.unit
    def test_async_url_left_alone(self):
        url = "postgresql+asyncpg://u:p@localhost/store"
        assert Settings(_env_file=None, DATABASE_URL=url).DATABASE_URL == url

    @pytest.mark.unit
    def test_paystack_configured(self):
        assert not Settings(_env_file=None, PAYSTACK_SECRET_KEY="").paystack_configured
        assert not Settings(
            _env_file=None, PAYSTACK_SECRET_KEY="your-paystack-secret"
        ).paystack_configured
        assert Settings(_env_file=None, PAYSTACK_SECRET_KEY="sk_test_1").paystack_configured

    @pytest.mark.unit
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.PAYMENT_REFERENCE_PREFIX == "neotech"
        assert settings.PAYSTACK_TIMEOUT_SECONDS == 30.0


class TestJsonFormatter:
    """The JSON formatter used outside the local environment."""

    def _record(self, msg="hello %s", args=("world",), **extra):
        record = logging.LogRecord(
            name="store.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg=msg,
            args=args,
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    @pytest.mark.unit
    def test_formats_message_and_request_context(self):
        request_id = set_request_context(path="/checkout", method="POST")
        try:
            record = self._record(extra_fields={"order_id": 7})
            RequestContextFilter().filter(record)
            payload = json.loads(JsonFormatter().format(record))
        finally:
            clear_request_context()

        assert payload["message"] == "hello world"
        assert payload["level"] == "INFO"
        assert payload["request_id"] == request_id
        assert payload["path"] == "/checkout"
        assert payload["method"] == "POST"
        assert payload["order_id"] == 7

    @pytest.mark.unit
    def test_incoming_request_id_is_kept(self):
        try:
            assert set_request_context(request_id="abc-123") == "abc-123"
            assert get_request_id() == "abc-123"
        finally:
            clear_request_context()
        assert get_request_id() is None
