import io
import json

import httpx
import pytest

from cozeapi.audio import (
    Audio,
    AudioCodec,
    AudioRooms,
    AudioSpeech,
    AudioTranscriptions,
    AudioVoices,
    RoomAudioConfig,
    RoomConfig,
    RoomVideoConfig,
    StreamVideoType,
    VideoCodec,
)
from cozeapi.models import AudioFormat, LanguageCode
from cozeapi.transport import CozeAPIError, Requester

LOG_HEADERS = {"X-Tt-Logid": "test_log_id"}
ROOM_DATA = {"room_id": "room1", "app_id": "app1", "token": "token", "uid": "uid1"}
ERROR_BODY = {"code": 0, "msg": "", "http_response": None}


def make_requester(body=None, *, content=None, status=200):
    """Requester over a mock transport; returns it and a record of the last request."""
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["content"] = request.read()
        if content is not None:
            return httpx.Response(status, content=content, headers=LOG_HEADERS)
        return httpx.Response(status, json=body, headers=LOG_HEADERS)

    return Requester(client=httpx.Client(transport=httpx.MockTransport(handler))), seen


def test_create_room_success():
    requester, seen = make_requester({"data": ROOM_DATA})
    resp = AudioRooms(requester).create(
        bot_id="bot1",
        conversation_id="conv1",
        voice_id="voice1",
        workflow_id="workflow1",
        config=RoomConfig(
            audio_config=RoomAudioConfig(codec=AudioCodec.OPUS),
            video_config=RoomVideoConfig(
                codec=VideoCodec.H264, stream_video_type=StreamVideoType.MAIN
            ),
            prologue_content="Hello Coze",
        ),
    )
    body = json.loads(seen["content"])
    assert (seen["method"], seen["path"]) == ("POST", "/v1/audio/rooms")
    assert body["config"] == {
        "audio_config": {"codec": "OPUS"},
        "video_config": {"codec": "H264", "stream_video_type": "main"},
        "prologue_content": "Hello Coze",
    }
    assert body["workflow_id"] == "workflow1"
    assert resp.log_id() == "test_log_id"
    assert (resp.room_id, resp.app_id, resp.token, resp.uid) == (
        "room1",
        "app1",
        "token",
        "uid1",
    )


def test_create_room_minimal_fields():
    requester, seen = make_requester({"data": ROOM_DATA})
    resp = AudioRooms(requester).create(bot_id="bot1")
    assert json.loads(seen["content"]) == {"bot_id": "bot1"}
    assert resp.log_id() == "test_log_id"
    assert resp.room_id == "room1"


def test_create_speech_success(tmp_path):
    requester, seen = make_requester(content=b"mock audio data")
    resp = AudioSpeech(requester).create(
        input="Hello, world!",
        voice_id="voice1",
        response_format=AudioFormat.MP3,
        speed=1.0,
    )
    body = json.loads(seen["content"])
    assert (seen["method"], seen["path"]) == ("POST", "/v1/audio/speech")
    assert body["response_format"] == "mp3"
    assert body["speed"] == 1.0
    assert resp.log_id() == "test_log_id"
    assert resp.data == b"mock audio data"

    target = tmp_path / "speech.mp3"
    resp.write_to_file(target)
    assert target.read_bytes() == b"mock audio data"


def test_transcription_success():
    requester, seen = make_requester({"data": {"text": "this_test"}})
    resp = AudioTranscriptions(requester).create(
        audio=io.BytesIO(b"testmp3"), filename="testmp3"
    )
    assert (seen["method"], seen["path"]) == ("POST", "/v1/audio/transcriptions")
    assert b"testmp3" in seen["content"]
    assert resp.log_id() == "test_log_id"
    assert resp.data.text == "this_test"


def test_clone_voice_success():
    requester, seen = make_requester({"data": {"voice_id": "voice1"}})
    resp = AudioVoices(requester).clone(
        voice_name="test_voice",
        file=io.BytesIO(b"mock audio data"),
        audio_format=AudioFormat.MP3,
        language=LanguageCode.EN,
        voice_id="base_voice",
        preview_text="Hello",
        text="Sample text",
        description="Test voice",
        space_id="test_space",
    )
    assert (seen["method"], seen["path"]) == ("POST", "/v1/audio/voices/clone")
    for fragment in (
        b'name="voice_name"',
        b"test_voice",
        b'name="language"',
        b'name="space_id"',
        b"mock audio data",
    ):
        assert fragment in seen["content"]
    assert resp.log_id() == "test_log_id"
    assert resp.voice_id == "voice1"


ERROR_CALLS = {
    "room": lambda r: AudioRooms(r).create(bot_id="invalid_bot"),
    "speech_invalid_voice": lambda r: AudioSpeech(r).create(
        input="Hello, world!", voice_id="invalid_voice",
        response_format=AudioFormat.MP3, speed=1.0,
    ),
    "speech_invalid_speed": lambda r: AudioSpeech(r).create(
        input="Hello, world!", voice_id="voice1",
        response_format=AudioFormat.MP3, speed=-1.0,
    ),
    "transcription": lambda r: AudioTranscriptions(r).create(
        audio=io.BytesIO(b"testmp3"), filename="testmp3"
    ),
    "clone": lambda r: AudioVoices(r).clone(
        voice_name="test_voice", file=io.BytesIO(b"invalid audio data")
    ),
}


@pytest.mark.parametrize("call", ERROR_CALLS.values(), ids=ERROR_CALLS.keys())
def test_error_response_raises(call):
    requester, seen = make_requester(ERROR_BODY, status=400)
    with pytest.raises(CozeAPIError):
        call(requester)
    assert seen["method"] == "POST"


def test_clone_voice_without_file():
    requester, seen = make_requester({"data": {"voice_id": "voice1"}})
    with pytest.raises(ValueError, match="file is required"):
        AudioVoices(requester).clone(voice_name="test_voice", file=None)
    assert seen == {}


def test_audio_groups_resources():
    requester, _ = make_requester({"data": ROOM_DATA})
    audio = Audio(requester)
    assert audio.rooms.create(bot_id="bot1").room_id == "room1"
    assert isinstance(audio.transcriptions, AudioTranscriptions)