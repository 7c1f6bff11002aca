"""工具模块 - 工具定义、注册、执行、格式转换与工具调用编排。"""

from __future__ import annotations

from .converter import (
    AnthropicInputSchema,
    AnthropicSchemaType,
    AnthropicTool,
    ToolConverter,
    convert_tool_result,
    to_anthropic_tools,
)
from .executor import ExecutorConfig, ToolExecutor, result_to_text
from .loop import (
    LoopConfig,
    LoopResult,
    LoopStatus,
    build_tool_result,
    extend_with_tool_result,
    find_tool_use,
    resolve_tool_use,
    run_with_tools,
)
from .registry import (
    DuplicateToolError,
    ToolNotFoundError,
    ToolRegistry,
    ToolRegistryError,
)
from .stream import StreamState, ToolUseStream, resolve_tool_use_stream
from .tool import FunctionTool, Tool
from .types import (
    DataType,
    InputSchema,
    ToolDefinition,
    ToolExecution,
    ToolExecutionStatus,
    ToolHandler,
)

__all__ = [
    "AnthropicInputSchema",
    "AnthropicSchemaType",
    "AnthropicTool",
    "DataType",
    "DuplicateToolError",
    "ExecutorConfig",
    "FunctionTool",
    "InputSchema",
    "LoopConfig",
    "LoopResult",
    "LoopStatus",
    "StreamState",
    "Tool",
    "ToolConverter",
    "ToolDefinition",
    "ToolExecution",
    "ToolExecutionStatus",
    "ToolExecutor",
    "ToolHandler",
    "ToolNotFoundError",
    "ToolRegistry",
    "ToolRegistryError",
    "ToolUseStream",
    "build_tool_result",
    "convert_tool_result",
    "extend_with_tool_result",
    "find_tool_use",
    "resolve_tool_use",
    "resolve_tool_use_stream",
    "result_to_text",
    "run_with_tools",
    "to_anthropic_tools",
]
