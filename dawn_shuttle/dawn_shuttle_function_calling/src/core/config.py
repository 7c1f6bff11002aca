"""请求配置类 - 定义调用模型时的各种参数及其默认值。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..tools.converter import AnthropicTool

DEFAULT_MODEL = "claude-3-opus-20240229"
"""默认模型。"""

DEFAULT_MAX_TOKENS = 4096
"""默认最大输出 token 数。"""

ToolChoice = str | dict[str, Any]
"""工具选择策略类型: "auto", "any", "none" 或 {"name": ...}。"""

SystemPrompt = str | list[dict[str, Any]]
"""系统提示类型, 可以是字符串或文本块列表。"""


@dataclass
class GenerateConfig:
    """请求配置, 包含重新发起模型请求所需的全部参数。

    Attributes:
        model: 模型标识, 默认 claude-3-opus。
        system: 系统提示。
        max_tokens: 最大输出 token 数, 默认 4096。
        metadata: 请求元数据(如 user_id)。
        stop_sequences: 停止序列。
        temperature: 采样温度, Anthropic 范围 0.0-1.0。
        top_p: Top-p 采样参数。
        top_k: Top-k 采样参数。
        tools: 已转换的工具列表。
        tool_choice: 工具选择策略, 默认 "auto"。
        extra_headers: 额外请求头(认证或 beta 功能)。
        extra: 额外参数, 合并进请求参数。
    """

    # 模型标识
    model: str = DEFAULT_MODEL

    system: SystemPrompt | None = None

    # 输出控制
    max_tokens: int = DEFAULT_MAX_TOKENS
    metadata: dict[str, Any] | None = None
    stop_sequences: list[str] | None = None

    # 采样参数
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None

    # 工具定义
    tools: list[AnthropicTool] | None = None
    tool_choice: ToolChoice = "auto"

    extra_headers: dict[str, str] | None = None

    # 额外参数(提供商特定)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def has_tools(self) -> bool:
        """是否配置了至少一个工具。"""
        return bool(self.tools)

    def to_dict(self) -> dict[str, Any]:
        """转换为字典, 过滤掉 None 值。

        Returns:
            dict[str, Any]: 不包含 None 值的配置字典。
        """
        result: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
        }

        if self.system is not None:
            result["system"] = self.system
        if self.metadata is not None:
            result["metadata"] = self.metadata
        if self.stop_sequences is not None:
            result["stop_sequences"] = list(self.stop_sequences)

        # 采样参数
        if self.temperature is not None:
            result["temperature"] = self.temperature
        if self.top_p is not None:
            result["top_p"] = self.top_p
        if self.top_k is not None:
            result["top_k"] = self.top_k

        # tool_choice 只在有工具时发送
        if self.tools:
            result["tools"] = [
                t if isinstance(t, dict) else t.to_dict() for t in self.tools
            ]
            result["tool_choice"] = self.tool_choice

        if self.extra_headers:
            result["extra_headers"] = dict(self.extra_headers)

        # 合并额外参数
        result.update(self.extra)

        return result
