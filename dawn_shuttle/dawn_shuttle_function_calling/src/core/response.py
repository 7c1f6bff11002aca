"""统一响应格式 - 单次响应与流式事件。"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .types import ContentBlock, ContentType, Role, StopReason, ToolUseContent


@dataclass
class Usage:
    """Token 使用统计。"""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class MessagesResponse:
    """模型单轮响应(不可变)。"""

    # 响应 ID(用于追踪)
    id: str = ""

    # 模型标识
    model: str | None = None

    role: Role = Role.ASSISTANT

    # 按顺序排列的内容块
    content: list[ContentBlock] = field(default_factory=list)

    # 停止原因: end_turn, max_tokens, tool_use 等
    stop_reason: StopReason | None = None

    stop_sequence: str | None = None

    # Token 使用统计
    usage: Usage | None = None

    # 原始响应(SDK 对象)
    raw: Any = None

    @property
    def text(self) -> str:
        """所有文本块拼接后的内容。"""
        return "".join(
            block.text for block in self.content
            if block.type == ContentType.TEXT
        )

    @property
    def tool_uses(self) -> list[ToolUseContent]:
        """所有工具调用块, 保持原顺序。"""
        return [
            block for block in self.content
            if isinstance(block, ToolUseContent)
        ]

    @property
    def first_tool_use(self) -> ToolUseContent | None:
        """第一个工具调用块。"""
        for block in self.content:
            if block.type == ContentType.TOOL_USE:
                return block
        return None

    @property
    def is_tool_use(self) -> bool:
        """模型是否请求调用工具。"""
        return self.stop_reason == StopReason.TOOL_USE

    def to_dict(self) -> dict[str, Any]:
        """转换为字典格式。"""
        result: dict[str, Any] = {
            "id": self.id,
            "role": self.role.value,
            "content": [block.to_dict() for block in self.content],
        }

        if self.model:
            result["model"] = self.model
        if self.stop_reason:
            result["stop_reason"] = self.stop_reason.value
        if self.stop_sequence:
            result["stop_sequence"] = self.stop_sequence
        if self.usage:
            result["usage"] = {
                "input_tokens": self.usage.input_tokens,
                "output_tokens": self.usage.output_tokens,
            }

        return result


class StreamEventType(str, Enum):
    """流式事件类型。"""

    MESSAGE_START = "message_start"
    CONTENT_BLOCK_START = "content_block_start"
    CONTENT_BLOCK_DELTA = "content_block_delta"
    CONTENT_BLOCK_STOP = "content_block_stop"
    MESSAGE_DELTA = "message_delta"
    MESSAGE_STOP = "message_stop"


@dataclass
class StreamChunk:
    """流式响应的单个增量。"""

    type: StreamEventType

    # 内容块索引(content_block_* 事件)
    index: int | None = None

    # 增量文本
    delta: str = ""

    # 工具参数的 JSON 片段
    partial_json: str = ""

    # 已完成的工具调用(content_block_stop 或 tool_use 的 message_delta)
    tool_use: ToolUseContent | None = None

    # 停止原因(message_delta)
    stop_reason: StopReason | None = None

    # 使用统计
    usage: Usage | None = None

    # 是否结束
    is_finished: bool = False

    # 原始事件
    raw: Any = None

    @property
    def is_tool_use(self) -> bool:
        """该增量是否标记模型正在请求工具调用。"""
        return self.stop_reason == StopReason.TOOL_USE

    @property
    def has_tool_use_request(self) -> bool:
        """该增量是否既携带工具调用, 又处于工具调用状态。"""
        return self.tool_use is not None and self.is_tool_use
