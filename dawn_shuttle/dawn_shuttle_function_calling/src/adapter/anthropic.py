"""Anthropic (Claude) 适配器 - 基于 anthropic SDK 的模型客户端。"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from anthropic import AsyncAnthropic

from .base import handle_anthropic_error, validate_config, validate_messages
from ..core.config import GenerateConfig
from ..core.error import AIError, ResponseParseError
from ..core.provider import BaseProvider
from ..core.response import MessagesResponse, StreamChunk, StreamEventType, Usage
from ..core.types import (
    ContentBlock,
    Message,
    StopReason,
    TextContent,
    ToolUseContent,
)
from ..tools.converter import ToolConverter

if TYPE_CHECKING:
    from anthropic.types import Message as AnthropicMessage

logger = logging.getLogger(__name__)


@dataclass
class _PendingToolUse:
    id: str
    name: str
    input: dict[str, Any] | None = None
    fragments: list[str] = field(default_factory=list)

    def finish(self) -> ToolUseContent:
        if self.input is None:
            raw = "".join(self.fragments)
            self.input = json.loads(raw) if raw else {}
        return ToolUseContent(id=self.id, name=self.name, input=dict(self.input))


class _StreamState:
    """单次流式请求中的工具调用累积状态。"""

    def __init__(self) -> None:
        self.pending: dict[int, _PendingToolUse] = {}
        self.completed: list[ToolUseContent] = []

    def start(self, index: int, block: Any) -> None:
        if getattr(block, "type", None) != "tool_use":
            return
        # content_block_start 中的 input 通常为空, 参数随 input_json_delta 到达
        initial = getattr(block, "input", None) or None
        self.pending[index] = _PendingToolUse(
            id=block.id,
            name=block.name,
            input=dict(initial) if initial else None,
        )

    def add_json(self, index: int, partial_json: str) -> None:
        pending = self.pending.get(index)
        if pending is not None:
            pending.input = None
            pending.fragments.append(partial_json)

    def stop(self, index: int, block: Any) -> ToolUseContent | None:
        pending = self.pending.pop(index, None)
        if getattr(block, "type", None) == "tool_use":
            tool_use = ToolConverter.tool_use_from_anthropic(block)
        elif pending is not None:
            tool_use = pending.finish()
        else:
            return None

        self.completed.append(tool_use)
        return tool_use

    @property
    def first_tool_use(self) -> ToolUseContent | None:
        return self.completed[0] if self.completed else None


class AnthropicProvider(BaseProvider):
    """Anthropic (Claude) Messages API 客户端。"""

    name: str = "anthropic"

    SUPPORTED_MODELS: ClassVar[list[str]] = [
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-latest",
        "claude-3-7-sonnet-latest",
        "claude-3-opus-latest",
        "claude-3-opus-20240229",
        "claude-3-sonnet-20240229",
        "claude-3-haiku-20240307",
        "claude-sonnet-4",
        "claude-opus-4",
    ]

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        *,
        client: AsyncAnthropic | None = None,
        **kwargs: Any,
    ) -> None:
        """初始化 Anthropic 适配器。

        Args:
            api_key: API 密钥(默认读取环境变量 ANTHROPIC_API_KEY)。
            base_url: 自定义 API 端点。
            client: 预先构建好的 AsyncAnthropic 客户端。
            **kwargs: 传给 AsyncAnthropic 的其他参数(如 default_headers)。
        """
        super().__init__(api_key, base_url, **kwargs)
        self._client: AsyncAnthropic | None = client

    def _get_client(self) -> AsyncAnthropic:
        """获取客户端(延迟初始化)。"""
        if self._client is None:
            self._client = AsyncAnthropic(
                api_key=self.api_key,
                base_url=self.base_url,
                **self.extra,
            )
        return self._client

    def supports_model(self, model: str) -> bool:
        return any(model.startswith(m) for m in self.SUPPORTED_MODELS)

    async def create_message(
        self,
        messages: list[Message],
        config: GenerateConfig,
    ) -> MessagesResponse:
        """发起单次请求。"""
        validate_config(config, self.name)
        validate_messages(messages, self.name)

        client = self._get_client()
        params = self._build_params(messages, config)

        try:
            response = await client.messages.create(**params)
        except Exception as e:
            raise handle_anthropic_error(e, self.name) from e

        try:
            return self._parse_response(response)
        except (KeyError, AttributeError, ValueError) as e:
            raise ResponseParseError(
                f"Failed to parse response: {e}",
                provider=self.name,
            ) from e

    async def stream_message(
        self,
        messages: list[Message],
        config: GenerateConfig,
    ) -> AsyncGenerator[StreamChunk, None]:
        """发起流式请求。

        tool_use 参数在 content_block_stop 时拼接完成; 停止原因为 tool_use
        的 message_delta 增量会携带第一个完成的工具调用。
        """
        validate_config(config, self.name)
        validate_messages(messages, self.name)

        client = self._get_client()
        params = self._build_params(messages, config)
        state = _StreamState()

        try:
            async with client.messages.stream(**params) as stream:
                async for event in stream:
                    chunk = self._parse_stream_event(event, state)
                    if chunk is not None:
                        yield chunk
        except AIError:
            raise
        except (json.JSONDecodeError, AttributeError) as e:
            raise ResponseParseError(
                f"Failed to parse stream event: {e}",
                provider=self.name,
            ) from e
        except Exception as e:
            raise handle_anthropic_error(e, self.name) from e

    def _build_params(
        self,
        messages: list[Message],
        config: GenerateConfig,
    ) -> dict[str, Any]:
        """构建 Anthropic API 请求参数。"""
        params = config.to_dict()
        params["messages"] = [msg.to_dict() for msg in messages]

        if "tool_choice" in params:
            params["tool_choice"] = self._convert_tool_choice(params["tool_choice"])

        return params

    def _convert_tool_choice(self, tool_choice: str | dict[str, Any]) -> dict[str, Any]:
        """转换工具选择策略。"""
        if isinstance(tool_choice, str):
            choice_map = {
                "auto": {"type": "auto"},
                "any": {"type": "any"},
                "required": {"type": "any"},
                "none": {"type": "none"},
            }
            return choice_map.get(tool_choice, {"type": "auto"})

        if "type" in tool_choice:
            return dict(tool_choice)

        if "name" in tool_choice:
            return {"type": "tool", "name": tool_choice["name"]}

        return {"type": "auto"}

    def _parse_response(self, response: AnthropicMessage) -> MessagesResponse:
        """解析 SDK 响应。"""
        content: list[ContentBlock] = []

        for block in response.content:
            if block.type == "text":
                content.append(TextContent(text=block.text))
            elif block.type == "tool_use":
                content.append(ToolConverter.tool_use_from_anthropic(block))
            else:
                logger.debug("Skipping unsupported content block %s", block.type)

        usage: Usage | None = None
        if response.usage:
            usage = Usage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            )

        return MessagesResponse(
            id=response.id,
            model=response.model,
            content=content,
            stop_reason=StopReason.parse(response.stop_reason),
            stop_sequence=response.stop_sequence,
            usage=usage,
            raw=response,
        )

    def _parse_stream_event(
        self,
        event: Any,
        state: _StreamState,
    ) -> StreamChunk | None:
        """解析单个流式事件, 忽略 SDK 的辅助事件(text, input_json 等)。"""
        event_type = getattr(event, "type", None)

        if event_type == "message_start":
            usage = getattr(event.message, "usage", None)
            return StreamChunk(
                type=StreamEventType.MESSAGE_START,
                usage=Usage(input_tokens=usage.input_tokens) if usage else None,
                raw=event,
            )

        if event_type == "content_block_start":
            state.start(event.index, event.content_block)
            return StreamChunk(
                type=StreamEventType.CONTENT_BLOCK_START,
                index=event.index,
                raw=event,
            )

        if event_type == "content_block_delta":
            delta = event.delta
            chunk = StreamChunk(
                type=StreamEventType.CONTENT_BLOCK_DELTA,
                index=event.index,
                raw=event,
            )
            if delta.type == "text_delta":
                chunk.delta = delta.text
            elif delta.type == "input_json_delta":
                chunk.partial_json = delta.partial_json
                state.add_json(event.index, delta.partial_json)
            return chunk

        if event_type == "content_block_stop":
            block = getattr(event, "content_block", None)
            return StreamChunk(
                type=StreamEventType.CONTENT_BLOCK_STOP,
                index=event.index,
                tool_use=state.stop(event.index, block),
                raw=event,
            )

        if event_type == "message_delta":
            stop_reason = StopReason.parse(event.delta.stop_reason)
            usage = getattr(event, "usage", None)
            return StreamChunk(
                type=StreamEventType.MESSAGE_DELTA,
                stop_reason=stop_reason,
                tool_use=(
                    state.first_tool_use
                    if stop_reason == StopReason.TOOL_USE
                    else None
                ),
                usage=Usage(output_tokens=usage.output_tokens) if usage else None,
                raw=event,
            )

        if event_type == "message_stop":
            return StreamChunk(
                type=StreamEventType.MESSAGE_STOP,
                is_finished=True,
                raw=event,
            )

        return None


# 便捷别名
anthropic: type[AnthropicProvider] = AnthropicProvider
