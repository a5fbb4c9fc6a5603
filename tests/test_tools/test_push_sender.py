"""
Tests for Push Sender Tool
Tests the logging sender and the Expo push client
"""

import json

import httpx
import pytest

from tools.push_sender import (
    ExpoPushSender,
    LoggingPushSender,
    get_push_sender,
)


TOKEN = "ExponentPushToken[abc123]"
EXPO_URL = "https://exp.host/--/api/v2/push/send"


def _expo_sender(handler, access_token=""):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ExpoPushSender(url=EXPO_URL, access_token=access_token, timeout=1.0, client=client)


class TestLoggingPushSender:
    """Tests for the logging sender"""

    @pytest.mark.asyncio
    async def test_records_and_succeeds(self):
        sender = LoggingPushSender()

        delivered = await sender.send(TOKEN, "SOS from Maria", "EMERGENCY!", {"patient_id": 1})

        assert delivered is True
        assert len(sender.sent) == 1
        assert sender.sent[0].data == {"patient_id": 1}


class TestExpoPushSender:
    """Tests for the Expo push client"""

    @pytest.mark.asyncio
    async def test_payload_and_ok_ticket(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"data": {"status": "ok", "id": "ticket-1"}})

        sender = _expo_sender(handler, access_token="secret")

        assert await sender.send(TOKEN, "SOS from Maria", "EMERGENCY!", {"patient_id": 1}) is True
        assert seen["body"]["to"] == TOKEN
        assert seen["body"]["title"] == "SOS from Maria"
        assert seen["body"]["data"] == {"patient_id": 1}
        assert seen["body"]["priority"] == "high"
        assert seen["auth"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_ticket_list(self):
        sender = _expo_sender(lambda request: httpx.Response(200, json={"data": [{"status": "ok"}]}))

        assert await sender.send(TOKEN, "t", "b") is True

    @pytest.mark.asyncio
    async def test_error_ticket(self):
        sender = _expo_sender(lambda request: httpx.Response(
            200, json={"data": {"status": "error", "message": "DeviceNotRegistered"}}
        ))

        assert await sender.send(TOKEN, "t", "b") is False

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        sender = _expo_sender(lambda request: httpx.Response(503, text="unavailable"))

        assert await sender.send(TOKEN, "t", "b") is False

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        sender = _expo_sender(handler)

        assert await sender.send(TOKEN, "t", "b") is False

    @pytest.mark.asyncio
    async def test_unreadable_body(self):
        sender = _expo_sender(lambda request: httpx.Response(200, text="<html>"))

        assert await sender.send(TOKEN, "t", "b") is False


class TestGetPushSender:
    """Tests for provider selection"""

    @pytest.mark.unit
    def test_expo(self):
        assert isinstance(get_push_sender("expo"), ExpoPushSender)

    @pytest.mark.unit
    @pytest.mark.parametrize("provider", ["log", "carrier-pigeon"])
    def test_logging_fallback(self, provider):
        assert isinstance(get_push_sender(provider), LoggingPushSender)
