"""Bots: creating, updating, publishing and retrieving them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping

from .models import HTTPResponse, ResponseModel, _coerce
from .transport import Requester


class BotMode(IntEnum):
    SINGLE_AGENT_WORKFLOW = 0
    MULTI_AGENT = 1


@dataclass
class BotPromptInfo:
    """The prompt a bot runs with."""

    prompt: str = ""


@dataclass
class BotOnboardingInfo:
    """What a bot shows when a conversation starts."""

    prologue: str = ""
    suggested_questions: list[str] = field(default_factory=list)


@dataclass
class BotKnowledge:
    """Knowledge bases a bot may search."""

    dataset_ids: list[str] = field(default_factory=list)
    auto_call: bool = False
    search_strategy: int = 0


@dataclass
class BotModelInfo:
    """The model behind a bot."""

    model_id: str = ""
    model_name: str = ""


@dataclass
class BotModelInfoConfig:
    """Model settings for a bot."""

    model_id: str
    top_k: int = 0
    top_p: float = 0.0
    max_tokens: int = 0
    temperature: float = 0.0
    context_round: int = 0
    response_format: str = ""
    presence_penalty: float = 0.0
    frequency_penalty: float = 0.0


@dataclass
class WorkflowIDList:
    """Workflows bound to a bot."""

    ids: list[str] = field(default_factory=list)


@dataclass
class BotPluginAPIInfo:
    api_id: str = ""
    name: str = ""
    description: str = ""


@dataclass
class BotPluginInfo:
    plugin_id: str = ""
    name: str = ""
    description: str = ""
    icon_url: str = ""
    api_info_list: list[BotPluginAPIInfo] = field(default_factory=list)


@dataclass
class Bot(ResponseModel):
    """Complete information about a published bot."""

    bot_id: str = ""
    name: str = ""
    description: str = ""
    icon_url: str = ""
    create_time: int = 0
    update_time: int = 0
    version: str = ""
    prompt_info: BotPromptInfo | None = None
    onboarding_info: BotOnboardingInfo | None = None
    bot_mode: BotMode | int = BotMode.SINGLE_AGENT_WORKFLOW
    plugin_info_list: list[BotPluginInfo] = field(default_factory=list)
    model_info: BotModelInfo | None = None
    http_response: HTTPResponse | None = field(default=None, repr=False, compare=False)


@dataclass
class SimpleBot:
    """Short information about a bot in a space."""

    bot_id: str = ""
    bot_name: str = ""
    description: str = ""
    icon_url: str = ""
    publish_time: str = ""


@dataclass
class CreateBotsResp(ResponseModel):
    bot_id: str = ""
    http_response: HTTPResponse | None = field(default=None, repr=False, compare=False)


@dataclass
class UpdateBotsResp(ResponseModel):
    http_response: HTTPResponse | None = field(default=None, repr=False, compare=False)


@dataclass
class PublishBotsResp(ResponseModel):
    bot_id: str = ""
    bot_version: str = ""
    http_response: HTTPResponse | None = field(default=None, repr=False, compare=False)


def _prompt_body(info: BotPromptInfo | None) -> dict[str, Any] | None:
    return None if info is None else {"prompt": info.prompt}


def _onboarding_body(info: BotOnboardingInfo | None) -> dict[str, Any] | None:
    if info is None:
        return None
    body: dict[str, Any] = {}
    if info.prologue:
        body["prologue"] = info.prologue
    if info.suggested_questions:
        body["suggested_questions"] = list(info.suggested_questions)
    return body


def _knowledge_body(knowledge: BotKnowledge | None) -> dict[str, Any] | None:
    if knowledge is None:
        return None
    return {
        "dataset_ids": list(knowledge.dataset_ids),
        "auto_call": knowledge.auto_call,
        "search_strategy": knowledge.search_strategy,
    }


def _model_config_body(config: BotModelInfoConfig | None) -> dict[str, Any] | None:
    if config is None:
        return None
    body: dict[str, Any] = {"model_id": config.model_id}
    optional = {
        "top_k": config.top_k,
        "top_p": config.top_p,
        "max_tokens": config.max_tokens,
        "temperature": config.temperature,
        "context_round": config.context_round,
        "response_format": config.response_format,
        "presence_penalty": config.presence_penalty,
        "frequency_penalty": config.frequency_penalty,
    }
    body.update({key: value for key, value in optional.items() if value})
    return body


def _workflow_body(workflows: WorkflowIDList | None) -> dict[str, Any] | None:
    if workflows is None:
        return None
    return {"ids": [{"id": workflow_id} for workflow_id in workflows.ids]}


def _plugin_from(data: Mapping[str, Any]) -> BotPluginInfo:
    return BotPluginInfo(
        plugin_id=data.get("plugin_id") or "",
        name=data.get("name") or "",
        description=data.get("description") or "",
        icon_url=data.get("icon_url") or "",
        api_info_list=[
            BotPluginAPIInfo(
                api_id=api.get("api_id") or "",
                name=api.get("name") or "",
                description=api.get("description") or "",
            )
            for api in data.get("api_info_list") or []
        ],
    )


def _bot_from(data: Mapping[str, Any], http_response: HTTPResponse | None) -> Bot:
    prompt = data.get("prompt_info")
    onboarding = data.get("onboarding_info")
    model = data.get("model_info")
    return Bot(
        bot_id=data.get("bot_id") or "",
        name=data.get("name") or "",
        description=data.get("description") or "",
        icon_url=data.get("icon_url") or "",
        create_time=int(data.get("create_time") or 0),
        update_time=int(data.get("update_time") or 0),
        version=data.get("version") or "",
        prompt_info=BotPromptInfo(prompt=prompt.get("prompt") or "") if prompt else None,
        onboarding_info=BotOnboardingInfo(
            prologue=onboarding.get("prologue") or "",
            suggested_questions=list(onboarding.get("suggested_questions") or []),
        )
        if onboarding
        else None,
        bot_mode=_coerce(BotMode, int(data.get("bot_mode") or 0)),
        plugin_info_list=[_plugin_from(p) for p in data.get("plugin_info_list") or []],
        model_info=BotModelInfo(
            model_id=model.get("model_id") or "",
            model_name=model.get("model_name") or "",
        )
        if model
        else None,
        http_response=http_response,
    )


def _simple_bot_from(data: Mapping[str, Any]) -> SimpleBot:
    return SimpleBot(
        bot_id=data.get("bot_id") or "",
        bot_name=data.get("bot_name") or "",
        description=data.get("description") or "",
        icon_url=data.get("icon_url") or "",
        publish_time=data.get("publish_time") or "",
    )


class Bots:
    """Bot resources."""

    def __init__(self, requester: Requester) -> None:
        self._requester = requester

    def create(
        self,
        space_id: str,
        name: str,
        description: str = "",
        icon_file_id: str = "",
        prompt_info: BotPromptInfo | None = None,
        onboarding_info: BotOnboardingInfo | None = None,
        model_info_config: BotModelInfoConfig | None = None,
        workflow_id_list: WorkflowIDList | None = None,
    ) -> CreateBotsResp:
        """Create a bot in a space."""
        body = {
            "space_id": space_id,
            "name": name,
            "description": description,
            "icon_file_id": icon_file_id,
            "prompt_info": _prompt_body(prompt_info),
            "onboarding_info": _onboarding_body(onboarding_info),
            "model_info_config": _model_config_body(model_info_config),
            "workflow_id_list": _workflow_body(workflow_id_list),
        }
        result, http_response = self._requester.request("POST", "/v1/bot/create", body)
        data = result.get("data") or {}
        return CreateBotsResp(bot_id=data.get("bot_id") or "", http_response=http_response)

    def update(
        self,
        bot_id: str,
        name: str = "",
        description: str = "",
        icon_file_id: str = "",
        prompt_info: BotPromptInfo | None = None,
        onboarding_info: BotOnboardingInfo | None = None,
        knowledge: BotKnowledge | None = None,
        model_info_config: BotModelInfoConfig | None = None,
        workflow_id_list: WorkflowIDList | None = None,
    ) -> UpdateBotsResp:
        """Update the draft of a bot."""
        body = {
            "bot_id": bot_id,
            "name": name,
            "description": description,
            "icon_file_id": icon_file_id,
            "prompt_info": _prompt_body(prompt_info),
            "onboarding_info": _onboarding_body(onboarding_info),
            "knowledge": _knowledge_body(knowledge),
            "model_info_config": _model_config_body(model_info_config),
            "workflow_id_list": _workflow_body(workflow_id_list),
        }
        _, http_response = self._requester.request("POST", "/v1/bot/update", body)
        return UpdateBotsResp(http_response=http_response)

    def publish(self, bot_id: str, connector_ids: list[str]) -> PublishBotsResp:
        """Publish a bot to the given connectors."""
        body = {"bot_id": bot_id, "connector_ids": list(connector_ids)}
        result, http_response = self._requester.request("POST", "/v1/bot/publish", body)
        data = result.get("data") or {}
        return PublishBotsResp(
            bot_id=data.get("bot_id") or "",
            bot_version=data.get("version") or "",
            http_response=http_response,
        )

    def retrieve(self, bot_id: str) -> Bot:
        """Fetch the published version of a bot."""
        result, http_response = self._requester.request(
            "GET", "/v1/bot/get_online_info", params={"bot_id": bot_id}
        )
        return _bot_from(result.get("data") or {}, http_response)