"""Core 模块 - 核心抽象和类型定义。"""

from .config import DEFAULT_MAX_TOKENS, DEFAULT_MODEL, GenerateConfig
from .error import (
    AIError,
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    ContentFilterError,
    ErrorCode,
    InternalServerError,
    InvalidRequestError,
    ModelNotFoundError,
    NoToolsDefinedError,
    ProviderNotAvailableError,
    QuotaExceededError,
    RateLimitError,
    ResponseParseError,
    TimeoutError,
    ToolExecutionFailedError,
    ToolUseContentMissingError,
)
from .provider import BaseProvider
from .response import MessagesResponse, StreamChunk, StreamEventType, Usage
from .types import (
    ContentBlock,
    ContentType,
    ImageContent,
    Message,
    Role,
    StopReason,
    TextContent,
    ToolResultContent,
    ToolUseContent,
)

__all__ = [
    # 类型定义
    "ContentBlock",
    "ContentType",
    "ImageContent",
    "Message",
    "Role",
    "StopReason",
    "TextContent",
    "ToolResultContent",
    "ToolUseContent",
    # 配置
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MODEL",
    "GenerateConfig",
    # 响应
    "MessagesResponse",
    "StreamChunk",
    "StreamEventType",
    "Usage",
    # Provider
    "BaseProvider",
    # 错误
    "AIError",
    "AuthenticationError",
    "ConfigurationError",
    "ConnectionError",
    "ContentFilterError",
    "ErrorCode",
    "InternalServerError",
    "InvalidRequestError",
    "ModelNotFoundError",
    "NoToolsDefinedError",
    "ProviderNotAvailableError",
    "QuotaExceededError",
    "RateLimitError",
    "ResponseParseError",
    "TimeoutError",
    "ToolExecutionFailedError",
    "ToolUseContentMissingError",
]
