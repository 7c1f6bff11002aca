"""工具调用编排 - 检测 tool_use 响应, 执行工具并把结果回传给模型。"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum

from ..core.config import GenerateConfig
from ..core.error import NoToolsDefinedError, ToolUseContentMissingError
from ..core.provider import BaseProvider
from ..core.response import MessagesResponse
from ..core.types import Message, ToolResultContent, ToolUseContent
from .converter import ToolConverter
from .registry import ToolRegistry

logger = logging.getLogger(__name__)


async def build_tool_result(
    registry: ToolRegistry,
    tool_use: ToolUseContent,
) -> ToolResultContent:
    """执行工具调用并构建对应的 tool_result 内容块。

    Args:
        registry: 工具注册表。
        tool_use: 模型给出的工具调用。

    Returns:
        ToolResultContent: 与调用 ID 配对的工具结果。
    """
    logger.debug("Dispatching tool_use %s -> %s", tool_use.id, tool_use.name)
    text = await registry.execute(tool_use.name, tool_use.input)
    return ToolConverter.result_to_anthropic(tool_use.id, text)


def extend_with_tool_result(
    messages: list[Message],
    tool_use: ToolUseContent,
    tool_result: ToolResultContent,
) -> list[Message]:
    """在消息历史后追加助手的工具调用回显和用户的工具结果。

    不修改传入的列表。
    """
    return [
        *messages,
        Message.tool_use(tool_use),
        Message.tool_result(tool_result),
    ]


def find_tool_use(response: MessagesResponse) -> ToolUseContent:
    """取出响应中第一个工具调用。

    Raises:
        ToolUseContentMissingError: 响应中没有 tool_use 内容块。
    """
    tool_uses = response.tool_uses
    if not tool_uses:
        raise ToolUseContentMissingError(response=response)

    if len(tool_uses) > 1:
        logger.warning(
            "Response %s contains %d tool_use blocks, only %s is resolved",
            response.id,
            len(tool_uses),
            tool_uses[0].name,
        )

    return tool_uses[0]


async def _resolve_once(
    provider: BaseProvider,
    response: MessagesResponse,
    messages: list[Message],
    config: GenerateConfig,
    registry: ToolRegistry,
) -> tuple[MessagesResponse, list[Message], ToolUseContent, ToolResultContent]:
    """执行一次工具调用往返, 返回新响应及扩展后的消息历史。"""
    if not config.has_tools:
        raise NoToolsDefinedError(model=config.model)

    tool_use = find_tool_use(response)
    tool_result = await build_tool_result(registry, tool_use)
    extended = extend_with_tool_result(messages, tool_use, tool_result)

    logger.debug("Sending tool_result for %s back to %s", tool_use.id, config.model)
    new_response = await provider.create_message(extended, config)
    return new_response, extended, tool_use, tool_result


async def resolve_tool_use(
    provider: BaseProvider,
    response: MessagesResponse,
    messages: list[Message],
    config: GenerateConfig,
    registry: ToolRegistry,
) -> MessagesResponse:
    """如有需要, 执行工具并把结果回传给模型。

    stop_reason 不是 tool_use 时原样返回 response。否则执行第一个
    tool_use 内容块对应的工具, 在 messages 之后追加助手回显与工具结果两条
    消息, 使用相同的 config 重新请求模型并返回新的响应。
    新响应如果再次请求工具, 需要调用方再次调用本函数。

    Args:
        provider: 模型客户端。
        response: 模型返回的响应。
        messages: 产生该响应的消息历史。
        config: 原请求配置, 原样用于后续请求。
        registry: 工具注册表。

    Returns:
        MessagesResponse: 原响应或携带工具结果后的新响应。

    Raises:
        NoToolsDefinedError: 请求中没有声明任何工具。
        ToolUseContentMissingError: 响应中找不到 tool_use 内容块。
    """
    if not response.is_tool_use:
        return response

    new_response, _, _, _ = await _resolve_once(
        provider, response, messages, config, registry
    )
    return new_response


class LoopStatus(str, Enum):
    """循环状态。"""

    COMPLETED = "completed"  # 模型不再请求工具
    MAX_ITERATIONS = "max_iterations"  # 达到最大迭代次数


@dataclass
class LoopResult:
    """循环执行结果。

    Attributes:
        response: 最终的模型响应。
        status: 循环状态。
        iterations: 工具调用往返次数。
        tool_calls: 所有工具调用及其结果。
        messages: 包含工具调用往返的完整消息历史。
    """

    response: MessagesResponse
    status: LoopStatus = LoopStatus.COMPLETED
    iterations: int = 0
    tool_calls: list[tuple[ToolUseContent, ToolResultContent]] = field(
        default_factory=list
    )
    messages: list[Message] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == LoopStatus.COMPLETED


@dataclass
class LoopConfig:
    """循环配置。

    Attributes:
        max_iterations: 最大工具调用往返次数。
        on_tool_call: 工具执行后的回调。
        on_iteration: 每次收到模型响应后的回调。
    """

    max_iterations: int = 10
    on_tool_call: Callable[[ToolUseContent, ToolResultContent], None] | None = None
    on_iteration: Callable[[int, MessagesResponse], None] | None = None


async def run_with_tools(
    provider: BaseProvider,
    messages: list[Message],
    registry: ToolRegistry,
    config: GenerateConfig | None = None,
    *,
    loop_config: LoopConfig | None = None,
) -> LoopResult:
    """发起对话并反复解析工具调用, 直到模型不再请求工具。

    config 未声明工具时自动使用注册表转换后的工具列表。

    Args:
        provider: 模型客户端。
        messages: 初始消息列表。
        registry: 工具注册表。
        config: 请求配置。
        loop_config: 循环配置。

    Returns:
        LoopResult: 循环执行结果。
    """
    cfg = loop_config or LoopConfig()
    gen_config = config or GenerateConfig()
    if gen_config.tools is None:
        gen_config = replace(gen_config, tools=registry.anthropic_tools)

    history = list(messages)
    response = await provider.create_message(history, gen_config)
    result = LoopResult(response=response, messages=history)

    if cfg.on_iteration:
        cfg.on_iteration(0, response)

    while response.is_tool_use:
        if result.iterations >= cfg.max_iterations:
            result.status = LoopStatus.MAX_ITERATIONS
            return result

        response, history, tool_use, tool_result = await _resolve_once(
            provider, response, history, gen_config, registry
        )
        result.iterations += 1
        result.tool_calls.append((tool_use, tool_result))
        result.response = response
        result.messages = history

        if cfg.on_tool_call:
            cfg.on_tool_call(tool_use, tool_result)
        if cfg.on_iteration:
            cfg.on_iteration(result.iterations, response)

    return result
