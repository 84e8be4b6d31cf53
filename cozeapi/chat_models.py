"""Chat data models and parsing of streamed chat events."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

from .models import HTTPResponse, Message, ResponseModel, _StrEnum, _coerce
from .transport import CozeAPIError

logger = logging.getLogger("cozeapi")


class ChatStatus(_StrEnum):
    CREATED = "created"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    REQUIRES_ACTION = "requires_action"
    CANCELLED = "canceled"


class ChatEventType(_StrEnum):
    CONVERSATION_CHAT_CREATED = "conversation.chat.created"
    CONVERSATION_CHAT_IN_PROGRESS = "conversation.chat.in_progress"
    CONVERSATION_MESSAGE_DELTA = "conversation.message.delta"
    CONVERSATION_MESSAGE_COMPLETED = "conversation.message.completed"
    CONVERSATION_CHAT_COMPLETED = "conversation.chat.completed"
    CONVERSATION_CHAT_FAILED = "conversation.chat.failed"
    CONVERSATION_CHAT_REQUIRES_ACTION = "conversation.chat.requires_action"
    CONVERSATION_AUDIO_DELTA = "conversation.audio.delta"
    ERROR = "error"
    DONE = "done"


@dataclass
class ChatError:
    code: int = 0
    msg: str = ""


@dataclass
class ChatUsage:
    token_count: int = 0
    output_count: int = 0
    input_count: int = 0


@dataclass
class ChatToolCallFunction:
    name: str = ""
    arguments: str = ""


@dataclass
class ChatToolCall:
    id: str = ""
    type: str = ""
    function: ChatToolCallFunction | None = None


@dataclass
class ChatSubmitToolOutputs:
    tool_calls: list[ChatToolCall] = field(default_factory=list)


@dataclass
class ChatRequiredAction:
    type: str = ""
    submit_tool_outputs: ChatSubmitToolOutputs | None = None


@dataclass
class Chat(ResponseModel):
    """The state of one chat within a conversation."""

    id: str = ""
    conversation_id: str = ""
    bot_id: str = ""
    created_at: int = 0
    completed_at: int = 0
    failed_at: int = 0
    meta_data: dict[str, str] | None = None
    last_error: ChatError | None = None
    status: ChatStatus | str = ""
    required_action: ChatRequiredAction | None = None
    usage: ChatUsage | None = None
    http_response: HTTPResponse | None = field(default=None, repr=False, compare=False)


@dataclass
class ToolOutput:
    """The result of a tool call, to be submitted back to a chat."""

    tool_call_id: str
    output: str


@dataclass
class WorkflowDebug:
    debug_url: str = ""


@dataclass
class ChatEvent:
    """One event of a streamed chat."""

    event: ChatEventType | str
    chat: Chat | None = None
    message: Message | None = None
    workflow_debug: WorkflowDebug | None = None

    def is_done(self) -> bool:
        return self.event in (ChatEventType.DONE, ChatEventType.ERROR)


@dataclass
class ChatPoll:
    """A finished chat together with its messages."""

    chat: Chat
    messages: list[Message] = field(default_factory=list)


def _tool_call_from(data: Mapping[str, Any]) -> ChatToolCall:
    function = data.get("function")
    return ChatToolCall(
        id=data.get("id") or "",
        type=data.get("type") or "",
        function=ChatToolCallFunction(
            name=function.get("name") or "",
            arguments=function.get("arguments") or "",
        )
        if function
        else None,
    )


def _required_action_from(data: Mapping[str, Any]) -> ChatRequiredAction:
    outputs = data.get("submit_tool_outputs")
    return ChatRequiredAction(
        type=data.get("type") or "",
        submit_tool_outputs=ChatSubmitToolOutputs(
            tool_calls=[_tool_call_from(call) for call in outputs.get("tool_calls") or []]
        )
        if outputs
        else None,
    )


def _chat_from(
    data: Mapping[str, Any], http_response: HTTPResponse | None = None
) -> Chat:
    meta = data.get("meta_data")
    last_error = data.get("last_error")
    required_action = data.get("required_action")
    usage = data.get("usage")
    return Chat(
        id=data.get("id") or "",
        conversation_id=data.get("conversation_id") or "",
        bot_id=data.get("bot_id") or "",
        created_at=int(data.get("created_at") or 0),
        completed_at=int(data.get("completed_at") or 0),
        failed_at=int(data.get("failed_at") or 0),
        meta_data=dict(meta) if meta else None,
        last_error=ChatError(
            code=int(last_error.get("code") or 0), msg=last_error.get("msg") or ""
        )
        if last_error
        else None,
        status=_coerce(ChatStatus, data.get("status") or ""),
        required_action=_required_action_from(required_action) if required_action else None,
        usage=ChatUsage(
            token_count=int(usage.get("token_count") or 0),
            output_count=int(usage.get("output_count") or 0),
            input_count=int(usage.get("input_count") or 0),
        )
        if usage
        else None,
        http_response=http_response,
    )


def _json_object(data: str) -> dict[str, Any]:
    value = json.loads(data)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got: {data}")
    return value


_MESSAGE_EVENTS = {
    ChatEventType.CONVERSATION_MESSAGE_DELTA,
    ChatEventType.CONVERSATION_MESSAGE_COMPLETED,
    ChatEventType.CONVERSATION_AUDIO_DELTA,
}
_CHAT_EVENTS = {
    ChatEventType.CONVERSATION_CHAT_CREATED,
    ChatEventType.CONVERSATION_CHAT_IN_PROGRESS,
    ChatEventType.CONVERSATION_CHAT_COMPLETED,
    ChatEventType.CONVERSATION_CHAT_FAILED,
    ChatEventType.CONVERSATION_CHAT_REQUIRES_ACTION,
}


def parse_chat_event(event: str, data: str) -> ChatEvent:
    """Build a :class:`ChatEvent` from an event name and its data; raise on error events."""
    event_type = _coerce(ChatEventType, event)
    if event_type == ChatEventType.DONE:
        if data and data not in ("[DONE]", '"[DONE]"'):
            try:
                debug = json.loads(data)
            except ValueError:
                debug = None
            if not isinstance(debug, dict):
                logger.warning("cannot decode workflow debug info from done event: %s", data)
                return ChatEvent(event=event_type)
            return ChatEvent(
                event=event_type,
                workflow_debug=WorkflowDebug(debug_url=debug.get("debug_url") or ""),
            )
        return ChatEvent(event=event_type)
    if event_type == ChatEventType.ERROR:
        raise CozeAPIError(code=0, msg=data)
    if event_type in _MESSAGE_EVENTS:
        return ChatEvent(event=event_type, message=Message.from_dict(_json_object(data)))
    if event_type in _CHAT_EVENTS:
        return ChatEvent(event=event_type, chat=_chat_from(_json_object(data)))
    return ChatEvent(event=event_type)


def _text(line: str | bytes) -> str:
    return line.decode("utf-8") if isinstance(line, bytes) else line


def iter_chat_events(lines: Iterable[str | bytes]) -> Iterator[ChatEvent]:
    """Yield chat events from the lines of an event stream, stopping after the last one."""
    it = iter(lines)
    for raw in it:
        line = _text(raw)
        if not line.startswith("event:"):
            continue
        event = line[6:].strip()
        data_line = next(it, None)
        if data_line is None:
            return
        data = _text(data_line)[5:].strip()
        chat_event = parse_chat_event(event, data)
        yield chat_event
        if chat_event.is_done():
            return