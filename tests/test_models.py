import json

import pytest

from cozeapi.models import (
    COM_BASE_URL,
    HTTP_LOG_ID_KEY,
    AudioFormat,
    HTTPResponse,
    LanguageCode,
    Message,
    MessageContentType,
    MessageObjectString,
    MessageObjectStringType,
    MessageRole,
    MessageType,
    ResponseModel,
    build_assistant_answer,
    build_user_question_objects,
    build_user_question_text,
    new_audio_message_object_by_id,
    new_audio_message_object_by_url,
    new_file_message_object_by_id,
    new_file_message_object_by_url,
    new_image_message_object_by_id,
    new_image_message_object_by_url,
    new_text_message_object,
)


def test_log_id_read_from_header():
    response = HTTPResponse(status_code=200, headers={HTTP_LOG_ID_KEY: "test_log_id"})
    assert response.log_id() == "test_log_id"


def test_log_id_header_lookup_ignores_case():
    response = HTTPResponse(status_code=200, headers={"x-tt-logid": "test_log_id"})
    assert response.log_id() == "test_log_id"


def test_log_id_missing_header_is_empty():
    assert HTTPResponse(status_code=200, headers={"X-Log-Id": "other"}).log_id() == ""


def test_response_model_log_id():
    model = ResponseModel()
    assert model.log_id() == ""
    model.http_response = HTTPResponse(200, {HTTP_LOG_ID_KEY: "abc"})
    assert model.log_id() == "abc"


def test_enum_values_and_str():
    assert str(AudioFormat.MP3) == "mp3"
    assert AudioFormat("ogg_opus") is AudioFormat.OGG_OPUS
    assert str(LanguageCode.EN) == "en"
    assert MessageType.UNKNOWN.value == ""
    assert COM_BASE_URL == "https://api.coze.com"


def test_build_user_question_text():
    message = build_user_question_text("hello")
    assert message.role is MessageRole.USER
    assert message.type is MessageType.QUESTION
    assert message.content == "hello"
    assert message.content_type is MessageContentType.TEXT
    assert message.meta_data is None


def test_build_assistant_answer_keeps_meta():
    message = build_assistant_answer("hello", {"k": "v"})
    assert message.role is MessageRole.ASSISTANT
    assert message.type is MessageType.ANSWER
    assert message.meta_data == {"k": "v"}


def test_build_user_question_objects_encodes_parts():
    message = build_user_question_objects(
        [new_text_message_object("hi"), new_file_message_object_by_url("url")]
    )
    assert message.content_type is MessageContentType.OBJECT_STRING
    assert json.loads(message.content) == [
        {"type": "text", "text": "hi"},
        {"type": "file", "file_url": "url"},
    ]
    assert " " not in message.content


@pytest.mark.parametrize(
    "factory, kind, attr",
    [
        (new_image_message_object_by_url, MessageObjectStringType.IMAGE, "file_url"),
        (new_image_message_object_by_id, MessageObjectStringType.IMAGE, "file_id"),
        (new_file_message_object_by_id, MessageObjectStringType.FILE, "file_id"),
        (new_file_message_object_by_url, MessageObjectStringType.FILE, "file_url"),
        (new_audio_message_object_by_id, MessageObjectStringType.AUDIO, "file_id"),
        (new_audio_message_object_by_url, MessageObjectStringType.AUDIO, "file_url"),
    ],
)
def test_object_factories(factory, kind, attr):
    obj = factory("ref")
    assert obj.type is kind
    assert getattr(obj, attr) == "ref"
    assert obj.to_dict() == {"type": kind.value, attr: "ref"}


def test_object_to_dict_omits_empty_fields():
    assert MessageObjectString(type=MessageObjectStringType.TEXT).to_dict() == {
        "type": "text"
    }


def test_message_round_trip():
    message = Message(
        role=MessageRole.USER,
        type=MessageType.QUESTION,
        content="Hello",
        content_type=MessageContentType.TEXT,
        meta_data={"key1": "value1"},
        id="msg1",
        conversation_id="conv1",
        created_at=1234567890,
    )
    assert Message.from_dict(message.to_dict()) == message


def test_message_to_dict_omits_empty_meta_data():
    data = Message(role="user", content="Hello").to_dict()
    assert "meta_data" not in data
    assert data["role"] == "user"
    assert data["content"] == "Hello"


def test_message_from_dict_keeps_unknown_role():
    message = Message.from_dict({"role": "system", "content": "x"})
    assert message.role == "system"
    assert message.type is MessageType.UNKNOWN


def test_message_from_dict_known_role_is_enum():
    message = Message.from_dict({"role": "assistant", "content": "Hi there!"})
    assert message.role is MessageRole.ASSISTANT
    assert message.content == "Hi there!"