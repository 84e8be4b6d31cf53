"""Audio resources: rooms, speech synthesis, transcription and voice cloning."""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any, BinaryIO, Mapping

from .models import (
    AudioFormat,
    HTTPResponse,
    LanguageCode,
    ResponseModel,
    _StrEnum,
    _plain,
)
from .transport import Requester


class AudioCodec(_StrEnum):
    AACLC = "AACLC"
    G711A = "G711A"
    OPUS = "OPUS"
    G722 = "G722"


class VideoCodec(_StrEnum):
    H264 = "H264"
    BYTEVC1 = "BYTEVC1"


class StreamVideoType(_StrEnum):
    MAIN = "main"
    SCREEN = "screen"


@dataclass
class RoomAudioConfig:
    """Audio settings of a room."""

    codec: AudioCodec | str


@dataclass
class RoomVideoConfig:
    """Video settings of a room."""

    codec: VideoCodec | str = ""
    stream_video_type: StreamVideoType | str = ""


@dataclass
class RoomConfig:
    """Settings of a room."""

    audio_config: RoomAudioConfig | None = None
    video_config: RoomVideoConfig | None = None
    prologue_content: str = ""


def _room_config_body(config: RoomConfig) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if config.audio_config is not None:
        body["audio_config"] = {"codec": _plain(config.audio_config.codec)}
    if config.video_config is not None:
        video: dict[str, Any] = {}
        if config.video_config.codec:
            video["codec"] = _plain(config.video_config.codec)
        if config.video_config.stream_video_type:
            video["stream_video_type"] = _plain(config.video_config.stream_video_type)
        body["video_config"] = video
    if config.prologue_content:
        body["prologue_content"] = config.prologue_content
    return body


@dataclass
class CreateAudioRoomsResp(ResponseModel):
    """A newly created audio room and the credentials to join it."""

    room_id: str = ""
    app_id: str = ""
    token: str = ""
    uid: str = ""
    http_response: HTTPResponse | None = field(default=None, repr=False, compare=False)


@dataclass
class CreateAudioSpeechResp(ResponseModel):
    """Synthesised speech audio."""

    data: bytes = b""
    http_response: HTTPResponse | None = field(default=None, repr=False, compare=False)

    def write_to_file(self, path: str | PathLike[str]) -> None:
        """Write the audio data to ``path``."""
        Path(path).write_bytes(self.data)


@dataclass
class AudioTranscriptionsData:
    text: str = ""


@dataclass
class CreateAudioTranscriptionsResp(ResponseModel):
    """The text recognised in an uploaded audio file."""

    data: AudioTranscriptionsData = field(default_factory=AudioTranscriptionsData)
    http_response: HTTPResponse | None = field(default=None, repr=False, compare=False)


@dataclass
class Voice:
    """A voice available for speech synthesis."""

    voice_id: str = ""
    name: str = ""
    is_system_voice: bool = False
    language_code: str = ""
    language_name: str = ""
    preview_text: str = ""
    preview_audio: str = ""
    available_training_times: int = 0
    create_time: int = 0
    update_time: int = 0


def _voice_from(data: Mapping[str, Any]) -> Voice:
    return Voice(
        voice_id=data.get("voice_id") or "",
        name=data.get("name") or "",
        is_system_voice=bool(data.get("is_system_voice")),
        language_code=data.get("language_code") or "",
        language_name=data.get("language_name") or "",
        preview_text=data.get("preview_text") or "",
        preview_audio=data.get("preview_audio") or "",
        available_training_times=int(data.get("available_training_times") or 0),
        create_time=int(data.get("create_time") or 0),
        update_time=int(data.get("update_time") or 0),
    )


@dataclass
class CloneAudioVoicesResp(ResponseModel):
    """The id of a newly cloned voice."""

    voice_id: str = ""
    http_response: HTTPResponse | None = field(default=None, repr=False, compare=False)


class AudioRooms:
    """Real-time audio rooms."""

    def __init__(self, requester: Requester) -> None:
        self._requester = requester

    def create(
        self,
        bot_id: str,
        conversation_id: str = "",
        voice_id: str = "",
        uid: str = "",
        workflow_id: str = "",
        config: RoomConfig | None = None,
    ) -> CreateAudioRoomsResp:
        """Create a room in which to talk with a bot."""
        body: dict[str, Any] = {"bot_id": bot_id}
        optional = {
            "conversation_id": conversation_id,
            "voice_id": voice_id,
            "uid": uid,
            "workflow_id": workflow_id,
        }
        body.update({key: value for key, value in optional.items() if value})
        if config is not None:
            body["config"] = _room_config_body(config)
        result, http_response = self._requester.request("POST", "/v1/audio/rooms", body)
        data = result.get("data") or {}
        return CreateAudioRoomsResp(
            room_id=data.get("room_id") or "",
            app_id=data.get("app_id") or "",
            token=data.get("token") or "",
            uid=data.get("uid") or "",
            http_response=http_response,
        )


class AudioSpeech:
    """Text-to-speech synthesis."""

    def __init__(self, requester: Requester) -> None:
        self._requester = requester

    def create(
        self,
        input: str,
        voice_id: str,
        response_format: AudioFormat | str | None = None,
        speed: float | None = None,
    ) -> CreateAudioSpeechResp:
        """Synthesise ``input`` with the given voice."""
        body = {
            "input": input,
            "voice_id": voice_id,
            "response_format": _plain(response_format),
            "speed": speed,
        }
        response = self._requester.raw_request("POST", "/v1/audio/speech", body)
        return CreateAudioSpeechResp(
            data=response.content,
            http_response=HTTPResponse(
                status_code=response.status_code,
                headers=response.headers,
                content_length=len(response.content),
            ),
        )


class AudioTranscriptions:
    """Speech-to-text transcription."""

    def __init__(self, requester: Requester) -> None:
        self._requester = requester

    def create(
        self, audio: BinaryIO | bytes, filename: str
    ) -> CreateAudioTranscriptionsResp:
        """Upload an audio file and return the recognised text."""
        result, http_response = self._requester.upload_file(
            "/v1/audio/transcriptions", audio, filename
        )
        data = result.get("data") or {}
        return CreateAudioTranscriptionsResp(
            data=AudioTranscriptionsData(text=data.get("text") or ""),
            http_response=http_response,
        )


class AudioVoices:
    """Voice cloning."""

    def __init__(self, requester: Requester) -> None:
        self._requester = requester

    def clone(
        self,
        voice_name: str,
        file: BinaryIO | bytes | None,
        audio_format: AudioFormat | str = "",
        language: LanguageCode | str | None = None,
        voice_id: str | None = None,
        preview_text: str | None = None,
        text: str | None = None,
        space_id: str | None = None,
        description: str | None = None,
    ) -> CloneAudioVoicesResp:
        """Clone a voice from an audio sample."""
        if file is None:
            raise ValueError("file is required")
        fields = {"voice_name": voice_name, "audio_format": str(_plain(audio_format))}
        optional = {
            "language": _plain(language),
            "voice_id": voice_id,
            "preview_text": preview_text,
            "text": text,
            "description": description,
            "space_id": space_id,
        }
        fields.update({key: str(value) for key, value in optional.items() if value is not None})
        result, http_response = self._requester.upload_file(
            "/v1/audio/voices/clone", file, voice_name, fields
        )
        data = result.get("data") or {}
        return CloneAudioVoicesResp(
            voice_id=data.get("voice_id") or "", http_response=http_response
        )


class Audio:
    """All audio resources."""

    def __init__(self, requester: Requester) -> None:
        self.rooms = AudioRooms(requester)
        self.speech = AudioSpeech(requester)
        self.voices = AudioVoices(requester)
        self.transcriptions = AudioTranscriptions(requester)