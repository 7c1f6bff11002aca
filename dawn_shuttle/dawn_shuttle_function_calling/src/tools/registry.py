"""工具注册表 - 显式注册工具, 并作为编排器使用的工具容器。"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .converter import AnthropicTool, to_anthropic_tools
from .executor import ExecutorConfig, ToolExecutor
from .tool import FunctionTool, Tool
from .types import InputSchema, ToolDefinition, ToolExecution, ToolHandler

logger = logging.getLogger(__name__)


class ToolRegistryError(Exception):
    """工具注册表错误。"""
    pass


class DuplicateToolError(ToolRegistryError):
    """工具名称重复。"""
    pass


class ToolNotFoundError(ToolRegistryError):
    """工具未找到。"""
    pass


@dataclass
class ToolRegistry:
    """工具注册表。

    按注册顺序保存工具, 提供按名称执行的能力。

    Attributes:
        tools: 工具字典(name -> Tool)。
        case_sensitive: 名称是否区分大小写。
        executor_config: 执行器配置。
    """

    tools: dict[str, Tool] = field(default_factory=dict)
    case_sensitive: bool = True
    executor_config: ExecutorConfig = field(default_factory=ExecutorConfig)

    def _normalize_name(self, name: str) -> str:
        return name if self.case_sensitive else name.lower()

    def register(
        self,
        tool: Tool | ToolHandler,
        *,
        name: str | None = None,
        description: str | None = None,
        input_schema: InputSchema | dict[str, Any] | None = None,
        override: bool = False,
    ) -> Tool:
        """注册工具。

        Args:
            tool: 工具对象或处理函数。
            name: 工具名称(函数时使用, 默认取函数名)。
            description: 工具描述(函数时使用)。
            input_schema: 输入参数结构(函数时使用)。
            override: 是否覆盖已存在的工具。

        Returns:
            Tool: 注册的工具对象。

        Raises:
            DuplicateToolError: 工具名称已存在。
        """
        if not isinstance(tool, Tool):
            tool = FunctionTool(
                tool,
                name=name,
                description=description,
                input_schema=input_schema,
            )

        key = self._normalize_name(tool.name)

        if key in self.tools and not override:
            raise DuplicateToolError(f"Tool '{tool.name}' already registered")

        self.tools[key] = tool
        logger.debug("Registered tool %s", tool.name)
        return tool

    def add(
        self,
        name: str,
        handler: ToolHandler,
        *,
        description: str = "",
        input_schema: InputSchema | dict[str, Any] | None = None,
    ) -> ToolRegistry:
        """注册函数工具并返回 self, 便于链式构建。"""
        self.register(
            handler,
            name=name,
            description=description,
            input_schema=input_schema,
        )
        return self

    def unregister(self, name: str) -> Tool:
        """注销工具。

        Raises:
            ToolNotFoundError: 工具未找到。
        """
        key = self._normalize_name(name)

        if key not in self.tools:
            raise ToolNotFoundError(f"Tool '{name}' not found")

        return self.tools.pop(key)

    def get(self, name: str) -> Tool:
        """获取工具。

        Raises:
            ToolNotFoundError: 工具未找到。
        """
        key = self._normalize_name(name)

        if key not in self.tools:
            raise ToolNotFoundError(f"Tool '{name}' not found")

        return self.tools[key]

    def has(self, name: str) -> bool:
        return self._normalize_name(name) in self.tools

    def list_tools(self) -> list[str]:
        """列出所有工具名称(按注册顺序)。"""
        return [tool.name for tool in self.tools.values()]

    def list_definitions(self) -> list[ToolDefinition]:
        """列出所有工具定义(按注册顺序)。"""
        return [tool.get_definition() for tool in self.tools.values()]

    @property
    def all_tools(self) -> list[ToolDefinition] | None:
        """工具定义列表, 注册表为空时为 None。"""
        if not self.tools:
            return None
        return self.list_definitions()

    @property
    def anthropic_tools(self) -> list[AnthropicTool] | None:
        """转换为 Anthropic 格式的工具列表, 注册表为空时为 None。"""
        return to_anthropic_tools(self.all_tools)

    async def execute(self, name: str, parameters: dict[str, Any] | None = None) -> str:
        """按名称执行工具并返回文本结果。

        工具内部的异常会转换为 "Error: ..." 文本, 除非执行器配置了 raise_on_error。

        Args:
            name: 工具名称。
            parameters: 调用参数。

        Returns:
            str: 文本结果。
        """
        execution = await self.run(name, parameters)
        return execution.output

    async def run(
        self,
        name: str,
        parameters: dict[str, Any] | None = None,
    ) -> ToolExecution:
        """执行工具并返回完整的执行记录。"""
        executor = ToolExecutor(registry=self, config=self.executor_config)
        return await executor.execute(name, parameters)

    def merge(self, other: ToolRegistry, *, override: bool = False) -> None:
        """合并另一个注册表。"""
        for tool in other.tools.values():
            self.register(tool, override=override)

    def clear(self) -> None:
        self.tools.clear()

    def __len__(self) -> int:
        return len(self.tools)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __getitem__(self, name: str) -> Tool:
        return self.get(name)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self.tools.values())

    def __repr__(self) -> str:
        tool_names = ", ".join(self.list_tools()[:5])
        if len(self.tools) > 5:
            tool_names += f", ... ({len(self.tools)} total)"
        return f"ToolRegistry([{tool_names}])"
