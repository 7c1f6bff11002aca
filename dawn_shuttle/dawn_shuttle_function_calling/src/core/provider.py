"""Provider 基类 - 定义模型客户端的统一接口。"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from .config import GenerateConfig
from .response import MessagesResponse, StreamChunk
from .types import Message


class BaseProvider(ABC):
    """模型客户端基类, 编排器只依赖此接口。

    Attributes:
        name: 提供商标识字符串。
        api_key: API 密钥。
        base_url: 自定义 API 端点。
        extra: 额外的提供商特定参数。
    """

    name: str = "base"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.api_key: str | None = api_key
        self.base_url: str | None = base_url
        self.extra: dict[str, Any] = kwargs

    @abstractmethod
    async def create_message(
        self,
        messages: list[Message],
        config: GenerateConfig,
    ) -> MessagesResponse:
        """发起单次请求。

        Args:
            messages: 消息列表。
            config: 请求配置。

        Returns:
            MessagesResponse: 模型响应。
        """

    @abstractmethod
    def stream_message(
        self,
        messages: list[Message],
        config: GenerateConfig,
    ) -> AsyncIterator[StreamChunk]:
        """发起流式请求。

        请求在首次迭代时才真正发出, 网络错误可能在迭代中途抛出。

        Args:
            messages: 消息列表。
            config: 请求配置。

        Returns:
            AsyncIterator[StreamChunk]: 流式增量的异步迭代器。
        """
