"""Tool 基类与显式注册的函数工具。"""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any

from .types import DataType, InputSchema, ToolDefinition, ToolHandler


class Tool(ABC):
    """工具抽象基类。

    所有工具必须提供:
    - name: 工具名称
    - description: 工具描述
    - execute: 执行方法
    """

    name: str = ""
    description: str = ""
    input_schema: InputSchema | None = None

    @abstractmethod
    async def execute(self, **kwargs: Any) -> Any:
        """执行工具。

        Args:
            **kwargs: 模型给出的调用参数。

        Returns:
            Any: 执行结果, 由执行器转换为文本。
        """

    def get_definition(self) -> ToolDefinition:
        """获取工具定义。

        Returns:
            ToolDefinition: 工具定义对象。
        """
        schema = self.input_schema or InputSchema(
            type=DataType.OBJECT, properties={}
        )
        return ToolDefinition(
            name=self.name,
            description=self.description,
            input_schema=schema,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class FunctionTool(Tool):
    """由显式描述 {description, input_schema, handler} 构成的工具。

    Attributes:
        handler: 处理函数, 同步或异步均可。
    """

    def __init__(
        self,
        handler: ToolHandler,
        *,
        name: str | None = None,
        description: str | None = None,
        input_schema: InputSchema | dict[str, Any] | None = None,
    ) -> None:
        self.handler = handler
        self.name = name or handler.__name__
        self.description = description or inspect.getdoc(handler) or ""

        if isinstance(input_schema, dict):
            input_schema = InputSchema.from_dict(input_schema)
        self.input_schema = input_schema

    async def execute(self, **kwargs: Any) -> Any:
        if inspect.iscoroutinefunction(self.handler):
            return await self.handler(**kwargs)

        # 同步函数在线程中执行
        result = await asyncio.to_thread(self.handler, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result
