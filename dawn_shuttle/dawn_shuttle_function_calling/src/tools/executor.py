"""工具执行器 - 按名称执行工具, 处理超时并把结果转换为文本。"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..core.error import ToolExecutionFailedError
from .types import ToolExecution, ToolExecutionStatus

if TYPE_CHECKING:
    from .registry import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass
class ExecutorConfig:
    """执行器配置。

    Attributes:
        timeout: 单次执行超时时间(秒), None 表示不限制。
        raise_on_error: 执行失败时抛出 ToolExecutionFailedError, 而不是返回错误文本。
        on_before_execute: 执行前回调。
        on_after_execute: 执行后回调。
        on_error: 错误回调。
    """

    timeout: float | None = 30.0
    raise_on_error: bool = False
    on_before_execute: Callable[[str, dict[str, Any]], None] | None = None
    on_after_execute: Callable[[ToolExecution], None] | None = None
    on_error: Callable[[str, Exception], None] | None = None


def result_to_text(result: Any) -> str:
    """把工具返回值转换为文本。

    Args:
        result: 工具返回值。

    Returns:
        str: 文本结果。
    """
    if result is None:
        return ""
    if isinstance(result, str):
        return result
    if isinstance(result, bytes):
        return result.decode("utf-8", errors="replace")
    if isinstance(result, (dict, list)):
        return json.dumps(result, ensure_ascii=False)
    return str(result)


@dataclass
class ToolExecutor:
    """工具执行器。

    负责按名称在注册表中查找工具并执行。执行失败默认转换为
    "Error: ..." 文本返回给模型; 不做重试。

    Attributes:
        registry: 工具注册表。
        config: 执行器配置。
    """

    registry: ToolRegistry
    config: ExecutorConfig = field(default_factory=ExecutorConfig)

    async def execute(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
    ) -> ToolExecution:
        """执行工具调用。

        Args:
            name: 工具名称。
            arguments: 调用参数。

        Returns:
            ToolExecution: 执行记录。

        Raises:
            ToolExecutionFailedError: 配置了 raise_on_error 且执行失败。
        """
        args = dict(arguments or {})
        execution = ToolExecution(name=name, arguments=args)
        start_time = time.monotonic()

        if not self.registry.has(name):
            error = LookupError(f"Tool '{name}' not found")
            return self._fail(execution, error, start_time)

        tool = self.registry.get(name)

        if self.config.on_before_execute:
            self.config.on_before_execute(name, args)

        logger.debug("Executing tool %s with arguments %s", name, args)

        try:
            result = await asyncio.wait_for(
                tool.execute(**args),
                timeout=self.config.timeout,
            )
        except asyncio.TimeoutError:
            error = TimeoutError(
                f"Tool '{name}' timed out after {self.config.timeout}s"
            )
            return self._fail(
                execution, error, start_time, status=ToolExecutionStatus.TIMEOUT
            )
        except Exception as e:
            return self._fail(execution, e, start_time)

        execution.output = result_to_text(result)
        execution.status = ToolExecutionStatus.SUCCESS
        execution.duration_ms = (time.monotonic() - start_time) * 1000

        if self.config.on_after_execute:
            self.config.on_after_execute(execution)

        return execution

    def _fail(
        self,
        execution: ToolExecution,
        error: Exception,
        start_time: float,
        *,
        status: ToolExecutionStatus = ToolExecutionStatus.FAILED,
    ) -> ToolExecution:
        """记录失败, 或按配置抛出。"""
        execution.status = status
        execution.error = error
        execution.output = f"Error: {error}"
        execution.duration_ms = (time.monotonic() - start_time) * 1000

        if self.config.on_error:
            self.config.on_error(execution.name, error)

        if self.config.raise_on_error:
            raise ToolExecutionFailedError(
                str(error),
                tool_name=execution.name,
                cause=error,
            ) from error

        logger.warning("Tool %s failed: %s", execution.name, error)

        if self.config.on_after_execute:
            self.config.on_after_execute(execution)

        return execution
