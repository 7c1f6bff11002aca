"""Adapter 模块 - 模型客户端适配器。"""

from .anthropic import AnthropicProvider, anthropic
from .base import handle_anthropic_error, validate_config, validate_messages

__all__ = [
    "AnthropicProvider",
    "anthropic",
    "handle_anthropic_error",
    "validate_config",
    "validate_messages",
]
