"""测试配置和共享 fixtures。"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest

from dawn_shuttle.dawn_shuttle_function_calling.src.core.config import GenerateConfig
from dawn_shuttle.dawn_shuttle_function_calling.src.core.provider import BaseProvider
from dawn_shuttle.dawn_shuttle_function_calling.src.core.response import (
    MessagesResponse,
    StreamChunk,
)
from dawn_shuttle.dawn_shuttle_function_calling.src.core.types import Message
from dawn_shuttle.dawn_shuttle_function_calling.src.tools import ToolRegistry


class ScriptedStream:
    """按脚本产出增量的流, 记录关闭次数。

    Attributes:
        chunks: 待产出的增量。
        error: 增量耗尽后抛出的异常。
        hang_after: 产出指定数量的增量后永久挂起。
    """

    def __init__(
        self,
        chunks: list[StreamChunk],
        *,
        error: BaseException | None = None,
        hang_after: int | None = None,
    ) -> None:
        self.chunks = list(chunks)
        self.error = error
        self.hang_after = hang_after
        self.emitted = 0
        self.close_calls = 0

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def __aiter__(self) -> ScriptedStream:
        return self

    async def __anext__(self) -> StreamChunk:
        if self.closed:
            raise StopAsyncIteration
        if self.hang_after is not None and self.emitted >= self.hang_after:
            await asyncio.Event().wait()
        if self.chunks:
            self.emitted += 1
            return self.chunks.pop(0)
        if self.error is not None:
            raise self.error
        raise StopAsyncIteration

    async def aclose(self) -> None:
        self.close_calls += 1


class ScriptedProvider(BaseProvider):
    """按脚本返回响应和流的模型客户端, 记录每次调用。"""

    name = "scripted"

    def __init__(
        self,
        responses: list[MessagesResponse] | None = None,
        streams: list[ScriptedStream] | None = None,
        *,
        stream_error: BaseException | None = None,
    ) -> None:
        super().__init__(api_key="test-key")
        self.responses = list(responses or [])
        self.streams = list(streams or [])
        self.stream_error = stream_error
        self.create_calls: list[tuple[list[Message], GenerateConfig]] = []
        self.stream_calls: list[tuple[list[Message], GenerateConfig]] = []

    async def create_message(
        self,
        messages: list[Message],
        config: GenerateConfig,
    ) -> MessagesResponse:
        self.create_calls.append((messages, config))
        return self.responses.pop(0)

    def stream_message(
        self,
        messages: list[Message],
        config: GenerateConfig,
    ) -> AsyncIterator[StreamChunk]:
        self.stream_calls.append((messages, config))
        if self.stream_error is not None:
            raise self.stream_error
        return self.streams.pop(0)


async def get_stock_price(ticker: str) -> str:
    """Get the latest stock price."""
    return {"AAPL": "193.50", "MSFT": "411.22"}.get(ticker, "unknown")


@pytest.fixture
def registry() -> ToolRegistry:
    """返回注册了 getStockPrice 的注册表。"""
    tools = ToolRegistry()
    tools.register(
        get_stock_price,
        name="getStockPrice",
        input_schema={
            "type": "object",
            "properties": {"ticker": {"type": "string"}},
            "required": ["ticker"],
        },
    )
    return tools


@pytest.fixture
def tool_config(registry: ToolRegistry) -> GenerateConfig:
    """返回声明了注册表工具的请求配置。"""
    return GenerateConfig(
        model="claude-3-5-sonnet-latest",
        tools=registry.anthropic_tools,
    )


@pytest.fixture
def messages() -> list[Message]:
    """返回初始消息历史。"""
    return [Message.user("What is AAPL trading at?")]


@pytest.fixture
def make_provider() -> type[ScriptedProvider]:
    """返回脚本化模型客户端类。"""
    return ScriptedProvider


@pytest.fixture
def make_stream() -> type[ScriptedStream]:
    """返回脚本化流类。"""
    return ScriptedStream
