"""核心类型定义 - 消息、角色、内容块等基础数据结构。"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal


class Role(str, Enum):
    """消息角色枚举。"""

    USER = "user"
    ASSISTANT = "assistant"


class ContentType(str, Enum):
    """内容块类型枚举。"""

    TEXT = "text"
    IMAGE = "image"
    TOOL_USE = "tool_use"
    TOOL_RESULT = "tool_result"


class StopReason(str, Enum):
    """模型停止生成的原因。"""

    END_TURN = "end_turn"
    MAX_TOKENS = "max_tokens"
    STOP_SEQUENCE = "stop_sequence"
    TOOL_USE = "tool_use"
    PAUSE_TURN = "pause_turn"
    REFUSAL = "refusal"

    @classmethod
    def parse(cls, value: str | None) -> StopReason | None:
        """解析停止原因, 未知值返回 None。

        Args:
            value: 原始停止原因字符串。

        Returns:
            StopReason | None: 对应的枚举值。
        """
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class TextContent:
    """文本内容块。"""

    type: Literal["text"] = "text"
    text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass
class ImageContent:
    """图片内容块(仅支持 base64)。"""

    type: Literal["image"] = "image"
    data: str = ""
    mime_type: str = "image/png"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "source": {
                "type": "base64",
                "media_type": self.mime_type,
                "data": self.data,
            },
        }


@dataclass
class ToolUseContent:
    """工具调用请求内容块。

    Attributes:
        id: 调用 ID(由模型生成, 工具结果必须回传同一 ID)。
        name: 工具名称。
        input: 调用参数。
    """

    type: Literal["tool_use"] = "tool_use"
    id: str = ""
    name: str = ""
    input: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "id": self.id,
            "name": self.name,
            "input": self.input,
        }


@dataclass
class ToolResultContent:
    """工具结果内容块。

    Attributes:
        tool_use_id: 对应的工具调用 ID。
        content: 结果内容(文本块列表)。
        is_error: 是否为错误结果。
    """

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str = ""
    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    @property
    def text(self) -> str:
        """拼接后的结果文本。"""
        return "".join(part.text for part in self.content)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "tool_use_id": self.tool_use_id,
            "content": [part.to_dict() for part in self.content],
            "is_error": self.is_error,
        }


ContentBlock = TextContent | ImageContent | ToolUseContent | ToolResultContent
"""内容块联合类型。"""


@dataclass
class Message:
    """对话中的一轮消息。"""

    role: Role
    content: str | list[ContentBlock] = ""

    @property
    def blocks(self) -> list[ContentBlock]:
        """以内容块列表形式返回消息内容。"""
        if isinstance(self.content, str):
            return [TextContent(text=self.content)] if self.content else []
        return list(self.content)

    def to_dict(self) -> dict[str, Any]:
        """转换为 Anthropic 请求中的消息格式。

        Returns:
            dict[str, Any]: 可序列化的消息字典。
        """
        if isinstance(self.content, str):
            return {"role": self.role.value, "content": self.content}

        return {
            "role": self.role.value,
            "content": [block.to_dict() for block in self.content],
        }

    @classmethod
    def user(cls, content: str | list[ContentBlock]) -> Message:
        """创建用户消息的便捷方法。

        Args:
            content: 文本或内容块列表。

        Returns:
            Message: 用户角色消息。
        """
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str | list[ContentBlock]) -> Message:
        """创建助手消息的便捷方法。

        Args:
            content: 文本或内容块列表。

        Returns:
            Message: 助手角色消息。
        """
        return cls(role=Role.ASSISTANT, content=content)

    @classmethod
    def tool_use(cls, block: ToolUseContent) -> Message:
        """创建回显工具调用的助手消息。"""
        return cls(role=Role.ASSISTANT, content=[block])

    @classmethod
    def tool_result(cls, block: ToolResultContent) -> Message:
        """创建携带工具结果的用户消息。"""
        return cls(role=Role.USER, content=[block])


# 类型别名
Messages = list[Message]
"""消息列表类型。"""
