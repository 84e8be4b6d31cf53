"""Chats with a bot: creating, polling, streaming and submitting tool outputs."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterator

import httpx

from .chat_models import (
    Chat,
    ChatEvent,
    ChatPoll,
    ChatStatus,
    ToolOutput,
    _chat_from,
    iter_chat_events,
)
from .models import HTTPResponse, Message, ResponseModel
from .transport import Requester

logger = logging.getLogger("cozeapi")

_CHAT_PATH = "/v3/chat"
_SUBMIT_PATH = "/v3/chat/submit_tool_outputs"


@dataclass
class ListChatsMessagesResp(ResponseModel):
    """The messages produced by one chat."""

    messages: list[Message] = field(default_factory=list)
    http_response: HTTPResponse | None = field(default=None, repr=False, compare=False)


def _ids(conversation_id: str, chat_id: str) -> dict[str, str]:
    return {"conversation_id": conversation_id, "chat_id": chat_id}


class ChatMessages:
    """Messages belonging to a chat."""

    def __init__(self, requester: Requester) -> None:
        self._requester = requester

    def list(self, conversation_id: str, chat_id: str) -> ListChatsMessagesResp:
        """List the messages of a chat."""
        result, http_response = self._requester.request(
            "GET", "/v3/chat/message/list", params=_ids(conversation_id, chat_id)
        )
        return ListChatsMessagesResp(
            messages=[Message.from_dict(item) for item in result.get("data") or []],
            http_response=http_response,
        )


class ChatStream:
    """An open stream of chat events; iterate over it and close it when done."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self.http_response = HTTPResponse(
            status_code=response.status_code, headers=response.headers
        )
        self._events = iter_chat_events(response.iter_lines())

    def __iter__(self) -> Iterator[ChatEvent]:
        return self

    def __next__(self) -> ChatEvent:
        try:
            return next(self._events)
        except BaseException:
            self.close()
            raise

    def log_id(self) -> str:
        return self.http_response.log_id()

    def close(self) -> None:
        """Release the underlying HTTP response."""
        self._response.close()

    def __enter__(self) -> ChatStream:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _chat_body(
    bot_id: str,
    user_id: str,
    messages: list[Message] | None,
    custom_variables: dict[str, str] | None,
    meta_data: dict[str, str] | None,
    connector_id: str,
    *,
    stream: bool,
) -> dict[str, Any]:
    body: dict[str, Any] = {"bot_id": bot_id, "user_id": user_id}
    if messages:
        body["additional_messages"] = [message.to_dict() for message in messages]
    body["stream"] = stream
    if custom_variables:
        body["custom_variables"] = dict(custom_variables)
    if not stream:
        body["auto_save_history"] = True
    if meta_data:
        body["meta_data"] = dict(meta_data)
    body["connector_id"] = connector_id
    return body


def _tool_outputs_body(
    tool_outputs: list[ToolOutput], connector_id: str, *, stream: bool
) -> dict[str, Any]:
    return {
        "tool_outputs": [
            {"tool_call_id": output.tool_call_id, "output": output.output}
            for output in tool_outputs
        ],
        "stream": stream,
        "connector_id": connector_id,
    }


class Chats:
    """Chat resources."""

    def __init__(self, requester: Requester, poll_interval: float = 1.0) -> None:
        self._requester = requester
        self._poll_interval = poll_interval
        self.messages = ChatMessages(requester)

    def _chat(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> Chat:
        result, http_response = self._requester.request(method, path, body, params=params)
        return _chat_from(result.get("data") or {}, http_response)

    def _stream(self, path: str, body: dict[str, Any], params: dict[str, str]) -> ChatStream:
        return ChatStream(self._requester.stream_request("POST", path, body, params=params))

    def create(
        self,
        bot_id: str,
        user_id: str,
        conversation_id: str = "",
        messages: list[Message] | None = None,
        custom_variables: dict[str, str] | None = None,
        meta_data: dict[str, str] | None = None,
        connector_id: str = "",
    ) -> Chat:
        """Start a chat without streaming; the answer arrives later."""
        body = _chat_body(
            bot_id, user_id, messages, custom_variables, meta_data, connector_id,
            stream=False,
        )
        return self._chat(
            "POST", _CHAT_PATH, body, {"conversation_id": conversation_id}
        )

    def create_and_poll(
        self,
        bot_id: str,
        user_id: str,
        conversation_id: str = "",
        messages: list[Message] | None = None,
        custom_variables: dict[str, str] | None = None,
        meta_data: dict[str, str] | None = None,
        connector_id: str = "",
        timeout: float | None = None,
    ) -> ChatPoll:
        """Start a chat and wait until it completes, cancelling it after ``timeout`` seconds."""
        chat = self.create(
            bot_id, user_id, conversation_id, messages, custom_variables, meta_data,
            connector_id,
        )
        conversation_id = chat.conversation_id
        started = time.monotonic()
        while True:
            time.sleep(self._poll_interval)
            if timeout is not None and time.monotonic() - started > timeout:
                logger.info("chat timed out after %s seconds, cancelling it", timeout)
                try:
                    chat = self.cancel(conversation_id, chat.id)
                except Exception as exc:
                    logger.warning("cancelling chat failed: %s", exc)
                    raise
                break
            current = self.retrieve(conversation_id, chat.id)
            if current.status == ChatStatus.COMPLETED:
                chat = current
                logger.info(
                    "chat completed in %.3f seconds", time.monotonic() - started
                )
                break
        listed = self.messages.list(conversation_id, chat.id)
        return ChatPoll(chat=chat, messages=listed.messages)

    def stream(
        self,
        bot_id: str,
        user_id: str,
        conversation_id: str = "",
        messages: list[Message] | None = None,
        custom_variables: dict[str, str] | None = None,
        meta_data: dict[str, str] | None = None,
        connector_id: str = "",
    ) -> ChatStream:
        """Start a chat and return its stream of events."""
        body = _chat_body(
            bot_id, user_id, messages, custom_variables, meta_data, connector_id,
            stream=True,
        )
        return self._stream(_CHAT_PATH, body, {"conversation_id": conversation_id})

    def cancel(self, conversation_id: str, chat_id: str) -> Chat:
        """Cancel a running chat."""
        return self._chat("POST", "/v3/chat/cancel", _ids(conversation_id, chat_id))

    def retrieve(self, conversation_id: str, chat_id: str) -> Chat:
        """Fetch the current state of a chat."""
        return self._chat(
            "GET", "/v3/chat/retrieve", params=_ids(conversation_id, chat_id)
        )

    def submit_tool_outputs(
        self,
        conversation_id: str,
        chat_id: str,
        tool_outputs: list[ToolOutput],
        connector_id: str = "",
    ) -> Chat:
        """Report tool results to a chat that requires action."""
        return self._chat(
            "POST",
            _SUBMIT_PATH,
            _tool_outputs_body(tool_outputs, connector_id, stream=False),
            _ids(conversation_id, chat_id),
        )

    def stream_submit_tool_outputs(
        self,
        conversation_id: str,
        chat_id: str,
        tool_outputs: list[ToolOutput],
        connector_id: str = "",
    ) -> ChatStream:
        """Report tool results and stream the events that follow."""
        return self._stream(
            _SUBMIT_PATH,
            _tool_outputs_body(tool_outputs, connector_id, stream=True),
            _ids(conversation_id, chat_id),
        )