"""Conversations: creating, retrieving and clearing them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .models import HTTPResponse, Message, ResponseModel
from .transport import Requester


def _response_slot() -> Any:
    return field(default=None, repr=False, compare=False)


@dataclass
class Conversation(ResponseModel):
    """A conversation between a user and a bot."""

    id: str = ""
    created_at: int = 0
    meta_data: dict[str, str] | None = None
    last_section_id: str = ""
    http_response: HTTPResponse | None = _response_slot()


@dataclass
class ClearConversationsResp(ResponseModel):
    """The new context section started by clearing a conversation."""

    id: str = ""
    conversation_id: str = ""
    http_response: HTTPResponse | None = _response_slot()


def _conversation_from(
    data: Mapping[str, Any], http_response: HTTPResponse | None = None
) -> Conversation:
    meta = data.get("meta_data")
    return Conversation(
        id=data.get("id") or "",
        created_at=int(data.get("created_at") or 0),
        meta_data=dict(meta) if meta else None,
        last_section_id=data.get("last_section_id") or "",
        http_response=http_response,
    )


class Conversations:
    """Conversation resources."""

    def __init__(self, requester: Requester) -> None:
        self._requester = requester

    def _data(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> tuple[Mapping[str, Any], HTTPResponse]:
        result, http_response = self._requester.request(method, path, body, params=params)
        return result.get("data") or {}, http_response

    def create(
        self,
        messages: list[Message] | None = None,
        meta_data: dict[str, str] | None = None,
        bot_id: str = "",
        connector_id: str = "",
    ) -> Conversation:
        """Create a conversation, optionally seeded with messages."""
        body: dict[str, Any] = {}
        if messages:
            body["messages"] = [message.to_dict() for message in messages]
        if meta_data:
            body["meta_data"] = dict(meta_data)
        if bot_id:
            body["bot_id"] = bot_id
        body["connector_id"] = connector_id
        return _conversation_from(*self._data("POST", "/v1/conversation/create", body))

    def retrieve(self, conversation_id: str) -> Conversation:
        """Fetch one conversation by id."""
        return _conversation_from(
            *self._data(
                "GET",
                "/v1/conversation/retrieve",
                params={"conversation_id": conversation_id},
            )
        )

    def clear(self, conversation_id: str) -> ClearConversationsResp:
        """Clear the context of a conversation."""
        data, http_response = self._data(
            "POST", f"/v1/conversations/{conversation_id}/clear"
        )
        return ClearConversationsResp(
            id=data.get("id") or "",
            conversation_id=data.get("conversation_id") or "",
            http_response=http_response,
        )