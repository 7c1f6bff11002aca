"""流式工具调用编排 - 在流中检测 tool_use 并拼接续写流。

ToolUseStream 是一个显式状态机:

- FORWARDING: 逐个转发原始流的增量。遇到携带工具调用且处于 tool_use
  状态的增量时执行工具, 发起续写请求并进入 DRAINING。
- DRAINING: 逐个转发续写流的增量, 续写流结束后进入 FINISHED。
  原始流剩余的增量不再转发。
- FINISHED: 已结束(正常结束、出错或被关闭), 不再产出任何增量。
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import AsyncIterable, AsyncIterator
from enum import Enum
from typing import Any

from ..core.config import GenerateConfig
from ..core.provider import BaseProvider
from ..core.response import StreamChunk
from ..core.types import Message, ToolUseContent
from .loop import build_tool_result, extend_with_tool_result
from .registry import ToolRegistry

logger = logging.getLogger(__name__)


class StreamState(str, Enum):
    """流状态。"""

    FORWARDING = "forwarding"
    DRAINING = "draining"
    FINISHED = "finished"


async def _next_chunk(iterator: AsyncIterator[StreamChunk]) -> StreamChunk:
    return await anext(iterator)


async def _close(stream: Any) -> None:
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()


class ToolUseStream:
    """自动解析工具调用的单次可消费流。

    Attributes:
        state: 当前状态。
        tool_use: 已解析的工具调用(如有)。
    """

    def __init__(
        self,
        provider: BaseProvider,
        stream: AsyncIterable[StreamChunk],
        messages: list[Message],
        config: GenerateConfig,
        registry: ToolRegistry,
    ) -> None:
        self._provider = provider
        self._source: AsyncIterator[StreamChunk] = aiter(stream)
        self._continuation: AsyncIterator[StreamChunk] | None = None
        self._messages = messages
        self._config = config
        self._registry = registry
        self.state = StreamState.FORWARDING
        self.tool_use: ToolUseContent | None = None
        self._pending: asyncio.Task[StreamChunk] | None = None
        self._interrupted = False
        self._streams_closed = False

    def __aiter__(self) -> ToolUseStream:
        return self

    async def __anext__(self) -> StreamChunk:
        try:
            while True:
                if self.state is StreamState.FINISHED:
                    raise StopAsyncIteration

                if self.state is StreamState.DRAINING:
                    return await self._pull(self._continuation)

                chunk = await self._pull(self._source)
                if not chunk.has_tool_use_request:
                    return chunk

                await self._start_continuation(chunk.tool_use)
        except BaseException:
            # 结束时关闭底层流
            await self.aclose()
            raise

    async def _pull(self, iterator: AsyncIterator[StreamChunk]) -> StreamChunk:
        """在独立任务中读取下一个增量, 以便 aclose 可以中断读取。"""
        task = asyncio.create_task(_next_chunk(iterator))
        self._pending = task
        try:
            return await task
        except asyncio.CancelledError:
            if self._interrupted:
                raise StopAsyncIteration from None
            raise
        finally:
            self._pending = None

    async def _start_continuation(self, tool_use: ToolUseContent) -> None:
        """执行工具并打开续写流。"""
        tool_result = await build_tool_result(self._registry, tool_use)

        # 执行期间被关闭时不再发起续写请求
        if self.state is StreamState.FINISHED:
            raise StopAsyncIteration

        messages = extend_with_tool_result(self._messages, tool_use, tool_result)
        logger.debug("Opening continuation stream for tool_use %s", tool_use.id)

        continuation = self._provider.stream_message(messages, self._config)
        if inspect.isawaitable(continuation):
            continuation = await continuation

        if self.state is StreamState.FINISHED:
            await _close(continuation)
            raise StopAsyncIteration

        self.tool_use = tool_use
        self._continuation = aiter(continuation)
        self.state = StreamState.DRAINING
        await _close(self._source)

    async def aclose(self) -> None:
        """关闭流, 同时关闭正在消费的底层流。

        可以在另一个任务正在读取时调用: 进行中的读取会被取消,
        读取方随后得到 StopAsyncIteration。
        """
        if self.state is not StreamState.FINISHED:
            self.state = StreamState.FINISHED
            logger.debug("Closing tool_use stream")

        pending = self._pending
        if pending is not None and not pending.done():
            self._interrupted = True
            pending.cancel()
            await asyncio.wait([pending])

        await self._close_streams()

    async def _close_streams(self) -> None:
        if self._streams_closed:
            return
        self._streams_closed = True

        # 原始流在进入 DRAINING 时已关闭
        if self._continuation is not None:
            await _close(self._continuation)
        else:
            await _close(self._source)

    async def __aenter__(self) -> ToolUseStream:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def resolve_tool_use_stream(
    provider: BaseProvider,
    stream: AsyncIterable[StreamChunk],
    messages: list[Message],
    config: GenerateConfig,
    registry: ToolRegistry,
) -> ToolUseStream:
    """包装流式响应, 自动执行工具并拼接续写流。

    非 tool_use 增量按原顺序转发。遇到 tool_use 增量时执行工具,
    以 messages + [助手回显, 工具结果] 和相同的 config 发起新的流式请求,
    并把新流的全部增量转发给调用方, 新流结束时输出流随之结束。
    任何错误都会终止输出流并原样抛出。

    Args:
        provider: 模型客户端。
        stream: 原始流。
        messages: 产生该流的消息历史。
        config: 原请求配置。
        registry: 工具注册表。

    Returns:
        ToolUseStream: 拼接后的流。
    """
    return ToolUseStream(provider, stream, messages, config, registry)
