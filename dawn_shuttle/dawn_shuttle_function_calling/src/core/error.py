"""错误类型定义 - 工具调用编排与模型请求的统一异常体系。"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .response import MessagesResponse


class ErrorCode(str, Enum):
    """错误代码枚举。"""

    # 认证相关
    AUTH_INVALID_KEY = "AUTH_INVALID_KEY"

    # 速率限制
    RATE_LIMIT = "RATE_LIMIT"

    # 模型相关
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"

    # 请求相关
    INVALID_REQUEST = "INVALID_REQUEST"

    # 内容相关
    CONTENT_FILTER = "CONTENT_FILTER"

    # 配额相关
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"

    # 网络/服务相关
    TIMEOUT = "TIMEOUT"
    CONNECTION = "CONNECTION"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # 解析相关
    PARSE_ERROR = "PARSE_ERROR"

    # 配置相关
    CONFIG_INVALID = "CONFIG_INVALID"

    # 工具调用相关
    TOOLS_NOT_DEFINED = "TOOLS_NOT_DEFINED"
    TOOL_USE_CONTENT_MISSING = "TOOL_USE_CONTENT_MISSING"
    TOOL_EXECUTION_FAILED = "TOOL_EXECUTION_FAILED"


class AIError(Exception):
    """基础异常。

    Attributes:
        code: 错误代码。
        message: 错误消息。
        provider: 提供商名称。
        model: 模型名称。
        request_id: 请求 ID。
        status_code: HTTP 状态码。
        cause: 原始异常。
        context: 附加上下文。
    """

    # 子类应重写这些属性
    default_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_message: str = "An error occurred"
    user_guide: str = "Please check your configuration and try again."

    def __init__(
        self,
        message: str | None = None,
        *,
        code: ErrorCode | None = None,
        provider: str | None = None,
        model: str | None = None,
        request_id: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
        **context: Any,
    ) -> None:
        self.code = code or self.default_code
        self.message = message or self.default_message
        self.provider = provider
        self.model = model
        self.request_id = request_id
        self.status_code = status_code
        self.cause = cause
        self.context = context

        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code.value}]"]

        if self.provider:
            parts.append(f"provider={self.provider}")
        if self.model:
            parts.append(f"model={self.model}")

        parts.append(self.message)

        if self.request_id:
            parts.append(f"(request_id: {self.request_id})")

        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.value!r}, "
            f"message={self.message!r}, "
            f"status_code={self.status_code})"
        )

    def format(self, *, include_guide: bool = False) -> str:
        """格式化错误信息。

        Args:
            include_guide: 是否附带处理建议。

        Returns:
            多行错误描述。
        """
        lines = [str(self)]
        lines.extend(f"  {key}: {value}" for key, value in self.context.items())

        if include_guide:
            lines.append(f"  建议: {self.user_guide}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """转换为字典，便于序列化。"""
        error: dict[str, Any] = {
            "code": self.code.value,
            "type": self.__class__.__name__,
            "message": self.message,
        }

        for key in ("provider", "model", "request_id", "status_code"):
            value = getattr(self, key)
            if value:
                error[key] = value

        return {"error": error}

    def with_context(self, **kwargs: Any) -> AIError:
        """添加上下文信息并返回 self, 便于链式调用。"""
        self.context.update(kwargs)
        return self


class AuthenticationError(AIError):
    """认证失败(API Key 无效或过期)。"""

    default_code = ErrorCode.AUTH_INVALID_KEY
    default_message = "Authentication failed"
    user_guide = "请检查 API Key 或认证请求头是否正确。"


class RateLimitError(AIError):
    """速率限制。"""

    default_code = ErrorCode.RATE_LIMIT
    default_message = "Rate limit exceeded"
    user_guide = "请等待后重试。"


class ModelNotFoundError(AIError):
    """模型不存在。"""

    default_code = ErrorCode.MODEL_NOT_FOUND
    default_message = "Model not found"
    user_guide = "请检查模型名称是否正确。"


class InvalidRequestError(AIError):
    """请求参数无效。"""

    default_code = ErrorCode.INVALID_REQUEST
    default_message = "Invalid request"
    user_guide = "请检查请求参数是否符合 API 要求。"


class ContentFilterError(AIError):
    """内容过滤触发。"""

    default_code = ErrorCode.CONTENT_FILTER
    default_message = "Content filtered"
    user_guide = "内容触发了安全过滤，请修改后重试。"


class QuotaExceededError(AIError):
    """配额用尽。"""

    default_code = ErrorCode.QUOTA_EXCEEDED
    default_message = "Quota exceeded"
    user_guide = "API 配额已用尽，请充值后重试。"


class TimeoutError(AIError):
    """请求超时。"""

    default_code = ErrorCode.TIMEOUT
    default_message = "Request timed out"
    user_guide = "请检查网络连接或稍后重试。"


class ConnectionError(AIError):
    """连接失败。"""

    default_code = ErrorCode.CONNECTION
    default_message = "Connection failed"
    user_guide = "无法连接到服务器，请检查网络连接。"


class ProviderNotAvailableError(AIError):
    """服务不可用(过载、502、503)。"""

    default_code = ErrorCode.SERVICE_UNAVAILABLE
    default_message = "Provider service unavailable"
    user_guide = "服务暂时不可用，请稍后重试。"


class InternalServerError(AIError):
    """服务器内部错误。"""

    default_code = ErrorCode.INTERNAL_ERROR
    default_message = "Internal server error"
    user_guide = "服务器内部错误，请稍后重试。"


class ResponseParseError(AIError):
    """响应解析失败。"""

    default_code = ErrorCode.PARSE_ERROR
    default_message = "Failed to parse response"
    user_guide = "响应格式异常，请稍后重试。"


class ConfigurationError(AIError):
    """配置错误(如缺少模型名称或参数越界)。"""

    default_code = ErrorCode.CONFIG_INVALID
    default_message = "Configuration error"
    user_guide = "请检查请求配置是否完整且取值合法。"


class NoToolsDefinedError(AIError):
    """模型请求调用工具, 但请求中没有声明任何工具。"""

    default_code = ErrorCode.TOOLS_NOT_DEFINED
    default_message = "Model requested tool use but no tools are defined"
    user_guide = "请在 GenerateConfig.tools 中传入注册表转换后的工具列表。"


class ToolUseContentMissingError(AIError):
    """停止原因为 tool_use, 但响应中找不到工具调用内容块。

    Attributes:
        response: 出错的响应, 便于诊断。
    """

    default_code = ErrorCode.TOOL_USE_CONTENT_MISSING
    default_message = "Cannot find tool_use content in response"
    user_guide = "响应与协议不一致，请检查模型客户端的响应解析。"

    def __init__(
        self,
        message: str | None = None,
        *,
        response: MessagesResponse | None = None,
        **kwargs: Any,
    ) -> None:
        self.response = response
        if response is not None:
            kwargs.setdefault("request_id", response.id or None)
            kwargs.setdefault("model", response.model)
        super().__init__(message, **kwargs)


class ToolExecutionFailedError(AIError):
    """注册的工具函数执行失败。

    Attributes:
        tool_name: 执行失败的工具名称。
    """

    default_code = ErrorCode.TOOL_EXECUTION_FAILED
    default_message = "Tool execution failed"
    user_guide = "请检查工具实现及传入的参数。"

    def __init__(
        self,
        message: str | None = None,
        *,
        tool_name: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.tool_name = tool_name
        super().__init__(message, **kwargs)


__all__ = [
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
