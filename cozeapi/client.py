"""The entry point bundling every API resource."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .audio import Audio
from .auth import Auth
from .bots import Bots
from .chats import Chats
from .conversations import Conversations
from .models import COM_BASE_URL
from .transport import Requester


class CozeAPI:
    """Client for the API, holding one object per resource."""

    def __init__(
        self,
        auth: Auth,
        base_url: str = COM_BASE_URL,
        http_client: httpx.Client | None = None,
        log_level: int = logging.INFO,
        log_handler: logging.Handler | None = None,
        timeout: float = 5.0,
    ) -> None:
        self.base_url = base_url
        self._owns_client = http_client is None
        self._http_client = (
            http_client if http_client is not None else httpx.Client(timeout=timeout)
        )

        package_logger = logging.getLogger("cozeapi")
        if log_handler is not None and log_handler not in package_logger.handlers:
            package_logger.addHandler(log_handler)
        package_logger.setLevel(log_level)

        requester = Requester(auth=auth, base_url=base_url, client=self._http_client)
        self.audio = Audio(requester)
        self.bots = Bots(requester)
        self.chat = Chats(requester)
        self.conversations = Conversations(requester)

    def close(self) -> None:
        """Close the HTTP client if this object created it."""
        if self._owns_client:
            self._http_client.close()

    def __enter__(self) -> CozeAPI:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()