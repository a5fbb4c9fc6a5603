"""
Push Sender Tool
Delivery port for push notifications to registered device tokens
"""

import logging
from typing import Dict, List, Optional, Any, Protocol
from dataclasses import dataclass, field
from datetime import datetime

import httpx

from config import settings


logger = logging.getLogger(__name__)


class PushSender(Protocol):
    """Anything that can deliver one push message; True means delivered"""

    async def send(
        self,
        token: str,
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None
    ) -> bool:
        ...


def _mask(token: str) -> str:
    return f"{token[:10]}..." if token else "<none>"


@dataclass
class PushRecord:
    """A push message accepted by the logging sender"""
    token: str
    title: str
    body: str
    data: Dict[str, Any] = field(default_factory=dict)
    sent_at: datetime = field(default_factory=datetime.utcnow)


class LoggingPushSender:
    """
    Sender used when no push provider is configured.
    Logs and records every message instead of delivering it.
    """

    def __init__(self):
        self.sent: List[PushRecord] = []

    async def send(
        self,
        token: str,
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None
    ) -> bool:
        logger.info(f"[PUSH] To {_mask(token)}: {title} - {body[:30]}...")
        self.sent.append(PushRecord(token=token, title=title, body=body, data=dict(data or {})))
        return True


class ExpoPushSender:
    """
    Sends one message per call to the Expo push service.
    Any transport error, non-2xx response or non-"ok" ticket counts as failed.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.url = url or settings.EXPO_PUSH_URL
        self.access_token = access_token if access_token is not None else settings.EXPO_ACCESS_TOKEN
        self.timeout = timeout or settings.PUSH_TIMEOUT_SECONDS
        self._client = client

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.url, json=payload, headers=self._headers(), timeout=self.timeout)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.url, json=payload, headers=self._headers())

    async def send(
        self,
        token: str,
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None
    ) -> bool:
        payload = {
            "to": token,
            "title": title,
            "body": body,
            "data": data or {},
            "sound": "default",
            "priority": "high",
        }

        try:
            response = await self._post(payload)
            response.raise_for_status()
            ticket = response.json().get("data", {})
        except httpx.HTTPError as e:
            logger.error(f"Push send error for {_mask(token)}: {e}")
            return False
        except ValueError as e:
            logger.error(f"Unreadable push response for {_mask(token)}: {e}")
            return False

        if isinstance(ticket, list):
            ticket = ticket[0] if ticket else {}

        if ticket.get("status") != "ok":
            logger.warning(
                f"Push rejected for {_mask(token)}: {ticket.get('message', 'unknown error')}"
            )
            return False

        logger.info(f"Successfully sent push to {_mask(token)}")
        return True


def get_push_sender(provider: Optional[str] = None) -> PushSender:
    """Build the sender selected by PUSH_PROVIDER"""
    provider = (provider or settings.PUSH_PROVIDER).lower()
    if provider == "expo":
        return ExpoPushSender()
    if provider != "log":
        logger.warning(f"Unknown push provider {provider!r}, falling back to logging sender")
    return LoggingPushSender()
