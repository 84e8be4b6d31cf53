"""Shared constants, response plumbing and conversation message models."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

COM_BASE_URL = "https://api.coze.com"
CN_BASE_URL = "https://api.coze.cn"

HTTP_LOG_ID_KEY = "X-Tt-Logid"
AUTHORIZATION_HEADER = "Authorization"


class _StrEnum(str, Enum):
    def __str__(self) -> str:
        return self.value


def _coerce(enum_cls: type[Enum], value: Any) -> Any:
    """Return the enum member for ``value``, or ``value`` itself when unknown."""
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


@dataclass
class HTTPResponse:
    """Status, headers and length of the HTTP response behind an API result."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    content_length: int = -1

    def log_id(self) -> str:
        """The server's log id for this response, or an empty string."""
        wanted = HTTP_LOG_ID_KEY.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return ""


class ResponseModel:
    """Base for results that remember the HTTP response they came from."""

    http_response: HTTPResponse | None = None

    def log_id(self) -> str:
        if self.http_response is None:
            return ""
        return self.http_response.log_id()


class AudioFormat(_StrEnum):
    WAV = "wav"
    PCM = "pcm"
    OGG_OPUS = "ogg_opus"
    M4A = "m4a"
    AAC = "aac"
    MP3 = "mp3"


class LanguageCode(_StrEnum):
    ZH = "zh"
    EN = "en"
    JA = "ja"
    ES = "es"
    ID = "id"
    PT = "pt"


class MessageRole(_StrEnum):
    UNKNOWN = "unknown"
    USER = "user"
    ASSISTANT = "assistant"


class MessageType(_StrEnum):
    QUESTION = "question"
    ANSWER = "answer"
    FUNCTION_CALL = "function_call"
    TOOL_OUTPUT = "tool_output"
    TOOL_RESPONSE = "tool_response"
    FOLLOW_UP = "follow_up"
    UNKNOWN = ""


class MessageContentType(_StrEnum):
    TEXT = "text"
    OBJECT_STRING = "object_string"
    CARD = "card"
    AUDIO = "audio"


class MessageObjectStringType(_StrEnum):
    TEXT = "text"
    FILE = "file"
    IMAGE = "image"
    AUDIO = "audio"


@dataclass
class MessageObjectString:
    """One part of a multimodal message."""

    type: MessageObjectStringType | str
    text: str = ""
    file_id: str = ""
    file_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": _plain(self.type)}
        if self.text:
            result["text"] = self.text
        if self.file_id:
            result["file_id"] = self.file_id
        if self.file_url:
            result["file_url"] = self.file_url
        return result


@dataclass
class Message:
    """A message in a conversation."""

    role: MessageRole | str = ""
    type: MessageType | str = MessageType.UNKNOWN
    content: str = ""
    reasoning_content: str = ""
    content_type: MessageContentType | str = ""
    meta_data: dict[str, str] | None = None
    id: str = ""
    conversation_id: str = ""
    section_id: str = ""
    bot_id: str = ""
    chat_id: str = ""
    created_at: int = 0
    updated_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "role": _plain(self.role),
            "type": _plain(self.type),
            "content": self.content,
            "reasoning_content": self.reasoning_content,
            "content_type": _plain(self.content_type),
        }
        if self.meta_data:
            result["meta_data"] = dict(self.meta_data)
        result.update(
            id=self.id,
            conversation_id=self.conversation_id,
            section_id=self.section_id,
            bot_id=self.bot_id,
            chat_id=self.chat_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Message:
        meta = data.get("meta_data")
        return cls(
            role=_coerce(MessageRole, data.get("role") or ""),
            type=_coerce(MessageType, data.get("type") or ""),
            content=data.get("content") or "",
            reasoning_content=data.get("reasoning_content") or "",
            content_type=_coerce(MessageContentType, data.get("content_type") or ""),
            meta_data=dict(meta) if meta else None,
            id=data.get("id") or "",
            conversation_id=data.get("conversation_id") or "",
            section_id=data.get("section_id") or "",
            bot_id=data.get("bot_id") or "",
            chat_id=data.get("chat_id") or "",
            created_at=int(data.get("created_at") or 0),
            updated_at=int(data.get("updated_at") or 0),
        )


def build_user_question_text(
    content: str, meta_data: dict[str, str] | None = None
) -> Message:
    """A plain-text question from the user."""
    return Message(
        role=MessageRole.USER,
        type=MessageType.QUESTION,
        content=content,
        content_type=MessageContentType.TEXT,
        meta_data=meta_data,
    )


def build_user_question_objects(
    objects: list[MessageObjectString], meta_data: dict[str, str] | None = None
) -> Message:
    """A multimodal question from the user, its parts encoded as JSON."""
    content = json.dumps(
        [obj.to_dict() for obj in objects], separators=(",", ":"), ensure_ascii=False
    )
    return Message(
        role=MessageRole.USER,
        type=MessageType.QUESTION,
        content=content,
        content_type=MessageContentType.OBJECT_STRING,
        meta_data=meta_data,
    )


def build_assistant_answer(
    content: str, meta_data: dict[str, str] | None = None
) -> Message:
    """A plain-text answer from the assistant."""
    return Message(
        role=MessageRole.ASSISTANT,
        type=MessageType.ANSWER,
        content=content,
        content_type=MessageContentType.TEXT,
        meta_data=meta_data,
    )


def new_text_message_object(text: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.TEXT, text=text)


def new_image_message_object_by_url(file_url: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.IMAGE, file_url=file_url)


def new_image_message_object_by_id(file_id: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.IMAGE, file_id=file_id)


def new_file_message_object_by_id(file_id: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.FILE, file_id=file_id)


def new_file_message_object_by_url(file_url: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.FILE, file_url=file_url)


def new_audio_message_object_by_id(file_id: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.AUDIO, file_id=file_id)


def new_audio_message_object_by_url(file_url: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.AUDIO, file_url=file_url)