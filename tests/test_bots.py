import json

import httpx
import pytest

from cozeapi.bots import (
    Bot,
    BotKnowledge,
    BotMode,
    BotModelInfoConfig,
    BotOnboardingInfo,
    BotPromptInfo,
    Bots,
    WorkflowIDList,
)
from cozeapi.transport import CozeAPIError, Requester


def _response(payload, status=200):
    return httpx.Response(status, json=payload, headers={"X-Tt-Logid": "test_log_id"})


def _bots(handler, seen):
    def record(request):
        seen.append(request)
        return handler(request)

    client = httpx.Client(transport=httpx.MockTransport(record))
    return Bots(Requester(client=client))


def test_create_bot_success():
    seen = []
    bots = _bots(lambda r: _response({"data": {"bot_id": "test_bot_id"}}), seen)
    resp = bots.create(
        space_id="test_space_id",
        name="Test Bot",
        description="Test Description",
        icon_file_id="test_icon_id",
        prompt_info=BotPromptInfo(prompt="Test Prompt"),
        onboarding_info=BotOnboardingInfo(
            prologue="Test Prologue", suggested_questions=["Q1", "Q2"]
        ),
        model_info_config=BotModelInfoConfig(model_id="test_model_id"),
    )
    assert resp.bot_id == "test_bot_id"
    assert resp.log_id() == "test_log_id"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/bot/create"
    body = json.loads(request.content)
    assert body["space_id"] == "test_space_id"
    assert body["prompt_info"] == {"prompt": "Test Prompt"}
    assert body["onboarding_info"]["suggested_questions"] == ["Q1", "Q2"]
    assert body["model_info_config"] == {"model_id": "test_model_id"}
    assert body["workflow_id_list"] is None


def test_create_bot_sends_workflow_ids():
    seen = []
    bots = _bots(lambda r: _response({"data": {"bot_id": "b"}}), seen)
    bots.create(space_id="s", name="n", workflow_id_list=WorkflowIDList(ids=["w1", "w2"]))
    body = json.loads(seen[0].content)
    assert body["workflow_id_list"] == {"ids": [{"id": "w1"}, {"id": "w2"}]}


def test_update_bot_success():
    seen = []
    bots = _bots(lambda r: _response({"code": 0, "msg": ""}), seen)
    resp = bots.update(
        bot_id="test_bot_id",
        name="Updated Bot",
        description="Updated Description",
        icon_file_id="updated_icon_id",
        prompt_info=BotPromptInfo(prompt="Updated Prompt"),
        onboarding_info=BotOnboardingInfo(
            prologue="Updated Prologue", suggested_questions=["Q3", "Q4"]
        ),
        knowledge=BotKnowledge(
            dataset_ids=["dataset1", "dataset2"], auto_call=True, search_strategy=1
        ),
    )
    assert resp.log_id() == "test_log_id"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/bot/update"
    body = json.loads(request.content)
    assert body["knowledge"] == {
        "dataset_ids": ["dataset1", "dataset2"],
        "auto_call": True,
        "search_strategy": 1,
    }


def test_publish_bot_success():
    seen = []
    bots = _bots(
        lambda r: _response({"data": {"bot_id": "test_bot_id", "version": "1.0.0"}}), seen
    )
    resp = bots.publish(bot_id="test_bot_id", connector_ids=["connector1", "connector2"])
    assert resp.bot_id == "test_bot_id"
    assert resp.bot_version == "1.0.0"
    assert resp.log_id() == "test_log_id"
    assert seen[0].url.path == "/v1/bot/publish"
    assert json.loads(seen[0].content)["connector_ids"] == ["connector1", "connector2"]


def test_retrieve_bot_success():
    payload = {
        "data": {
            "bot_id": "test_bot_id",
            "name": "Test Bot",
            "description": "Test Description",
            "icon_url": "https://example.com/icon.png",
            "create_time": 1234567890,
            "update_time": 1234567891,
            "version": "1.0.0",
            "bot_mode": 1,
            "prompt_info": {"prompt": "Test Prompt"},
            "onboarding_info": {
                "prologue": "Test Prologue",
                "suggested_questions": ["Q1", "Q2"],
            },
            "plugin_info_list": [
                {
                    "plugin_id": "plugin1",
                    "name": "Plugin 1",
                    "description": "Plugin Description",
                    "icon_url": "https://example.com/plugin-icon.png",
                    "api_info_list": [
                        {"api_id": "api1", "name": "API 1", "description": "API Description"}
                    ],
                }
            ],
            "model_info": {"model_id": "model1", "model_name": "Model 1"},
        }
    }
    seen = []
    bots = _bots(lambda r: _response(payload), seen)
    resp = bots.retrieve(bot_id="test_bot_id")
    assert seen[0].method == "GET"
    assert seen[0].url.path == "/v1/bot/get_online_info"
    assert seen[0].url.params["bot_id"] == "test_bot_id"
    assert isinstance(resp, Bot)
    assert resp.bot_id == "test_bot_id"
    assert resp.name == "Test Bot"
    assert resp.version == "1.0.0"
    assert resp.bot_mode == BotMode.MULTI_AGENT
    assert resp.log_id() == "test_log_id"
    assert resp.plugin_info_list[0].api_info_list[0].api_id == "api1"
    assert resp.model_info.model_name == "Model 1"
    assert resp.onboarding_info.suggested_questions == ["Q1", "Q2"]


def test_create_bot_error():
    bots = _bots(lambda r: _response({"code": 0, "msg": ""}, status=400), [])
    with pytest.raises(CozeAPIError):
        bots.create(space_id="s", name="n")


def test_bot_mode_values():
    assert BotMode(1) is BotMode.MULTI_AGENT
    assert BotMode(0) is BotMode.SINGLE_AGENT_WORKFLOW