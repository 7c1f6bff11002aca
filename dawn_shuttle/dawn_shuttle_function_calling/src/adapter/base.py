"""适配器基础工具 - 配置校验与 SDK 错误映射。"""

from __future__ import annotations

import anthropic

from ..core.config import GenerateConfig
from ..core.error import (
    AIError,
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    ContentFilterError,
    InternalServerError,
    InvalidRequestError,
    ModelNotFoundError,
    ProviderNotAvailableError,
    QuotaExceededError,
    RateLimitError,
    TimeoutError,
)
from ..core.types import Message


def validate_config(
    config: GenerateConfig,
    provider_name: str,
    *,
    temp_max: float = 1.0,
) -> None:
    """校验请求配置。

    Args:
        config: 请求配置。
        provider_name: 供应商标识。
        temp_max: temperature 最大值。

    Raises:
        ConfigurationError: 配置无效。
    """
    if not config.model:
        raise ConfigurationError(
            "Model name is required",
            provider=provider_name,
        )

    if config.temperature is not None and not 0.0 <= config.temperature <= temp_max:
        raise ConfigurationError(
            f"Temperature must be between 0.0 and {temp_max}, got {config.temperature}",
            provider=provider_name,
        )

    if config.top_p is not None and not 0.0 <= config.top_p <= 1.0:
        raise ConfigurationError(
            f"top_p must be between 0.0 and 1.0, got {config.top_p}",
            provider=provider_name,
        )

    if config.top_k is not None and config.top_k <= 0:
        raise ConfigurationError(
            f"top_k must be positive, got {config.top_k}",
            provider=provider_name,
        )

    if config.max_tokens <= 0:
        raise ConfigurationError(
            f"max_tokens must be positive, got {config.max_tokens}",
            provider=provider_name,
        )


def validate_messages(messages: list[Message], provider_name: str) -> None:
    """校验消息列表。

    Raises:
        ConfigurationError: 消息列表为空。
    """
    if not messages:
        raise ConfigurationError(
            "Messages list cannot be empty",
            provider=provider_name,
        )


_STATUS_ERRORS: dict[int, type[AIError]] = {
    400: InvalidRequestError,
    401: AuthenticationError,
    403: AuthenticationError,
    404: ModelNotFoundError,
    429: RateLimitError,
    500: InternalServerError,
    502: ProviderNotAvailableError,
    503: ProviderNotAvailableError,
    504: TimeoutError,
    529: ProviderNotAvailableError,
}


def map_status_code_to_error(
    status_code: int,
    message: str,
    provider_name: str,
    cause: Exception | None = None,
    request_id: str | None = None,
) -> AIError:
    """根据 HTTP 状态码映射到具体错误类型。"""
    error_class = _STATUS_ERRORS.get(status_code, InternalServerError)

    return error_class(
        message,
        provider=provider_name,
        status_code=status_code,
        request_id=request_id,
        cause=cause,
    )


def handle_anthropic_error(error: Exception, provider_name: str) -> AIError:
    """把 anthropic SDK 抛出的异常转换为统一错误类型。

    Args:
        error: 原始异常对象。
        provider_name: 供应商标识。

    Returns:
        具体的错误类型实例。
    """
    if isinstance(error, AIError):
        return error

    message = str(error)

    if isinstance(error, anthropic.APITimeoutError):
        return TimeoutError(message, provider=provider_name, cause=error)

    if isinstance(error, anthropic.APIConnectionError):
        return ConnectionError(message, provider=provider_name, cause=error)

    if isinstance(error, anthropic.APIStatusError):
        lowered = message.lower()
        if "credit" in lowered or "quota" in lowered:
            return QuotaExceededError(
                message,
                provider=provider_name,
                status_code=error.status_code,
                request_id=error.request_id,
                cause=error,
            )
        if "content_filter" in lowered:
            return ContentFilterError(
                message,
                provider=provider_name,
                status_code=error.status_code,
                request_id=error.request_id,
                cause=error,
            )
        return map_status_code_to_error(
            error.status_code,
            message,
            provider_name,
            cause=error,
            request_id=error.request_id,
        )

    if "overloaded" in message.lower():
        return ProviderNotAvailableError(message, provider=provider_name, cause=error)

    return InternalServerError(
        f"Unexpected error: {type(error).__name__}: {message}",
        provider=provider_name,
        cause=error,
    ).with_context(original_type=type(error).__name__)
