"""测试 core/error.py - 错误类型定义。"""

import pytest

from dawn_shuttle.dawn_shuttle_function_calling.src.core.error import (
    AIError,
    AuthenticationError,
    ConfigurationError,
    ErrorCode,
    NoToolsDefinedError,
    ToolExecutionFailedError,
    ToolUseContentMissingError,
)
from dawn_shuttle.dawn_shuttle_function_calling.src.core.response import (
    MessagesResponse,
)
from dawn_shuttle.dawn_shuttle_function_calling.src.core.types import StopReason


class TestAIError:
    """测试 AIError。"""

    def test_basic_error(self) -> None:
        """测试基本错误。"""
        error = AIError("Something went wrong")
        assert "[INTERNAL_ERROR]" in str(error)
        assert "Something went wrong" in str(error)

    def test_default_message(self) -> None:
        """测试默认消息。"""
        error = AuthenticationError()
        assert error.message == "Authentication failed"
        assert error.code == ErrorCode.AUTH_INVALID_KEY

    def test_error_with_provider_and_model(self) -> None:
        """测试带 provider 和 model 的错误。"""
        error = AIError("Error", provider="anthropic", model="claude-3-opus")
        assert "provider=anthropic" in str(error)
        assert "model=claude-3-opus" in str(error)

    def test_request_id(self) -> None:
        """测试请求 ID。"""
        error = AIError("Error", request_id="req_123")
        assert "(request_id: req_123)" in str(error)

    def test_repr(self) -> None:
        """测试 repr。"""
        error = ConfigurationError("bad", status_code=400)
        assert repr(error) == (
            "ConfigurationError(code='CONFIG_INVALID', message='bad', status_code=400)"
        )

    def test_format_with_context_and_guide(self) -> None:
        """测试格式化输出。"""
        error = AIError("Error").with_context(attempt=2)
        text = error.format(include_guide=True)

        assert "attempt: 2" in text
        assert "建议:" in text

    def test_to_dict(self) -> None:
        """测试转换为字典。"""
        error = AuthenticationError("Invalid key", provider="anthropic", status_code=401)
        assert error.to_dict() == {
            "error": {
                "code": "AUTH_INVALID_KEY",
                "type": "AuthenticationError",
                "message": "Invalid key",
                "provider": "anthropic",
                "status_code": 401,
            }
        }

    def test_is_exception(self) -> None:
        """测试可以作为异常抛出。"""
        with pytest.raises(AIError):
            raise ConfigurationError("Missing model")


class TestToolErrors:
    """测试工具调用相关错误。"""

    def test_no_tools_defined(self) -> None:
        """测试 NoToolsDefinedError。"""
        error = NoToolsDefinedError()
        assert error.code == ErrorCode.TOOLS_NOT_DEFINED
        assert isinstance(error, AIError)

    def test_tool_use_content_missing_carries_response(self) -> None:
        """测试 ToolUseContentMissingError 携带响应。"""
        response = MessagesResponse(
            id="msg_1",
            model="claude-3-opus-20240229",
            stop_reason=StopReason.TOOL_USE,
        )
        error = ToolUseContentMissingError(response=response)

        assert error.response is response
        assert error.request_id == "msg_1"
        assert error.model == "claude-3-opus-20240229"
        assert error.code == ErrorCode.TOOL_USE_CONTENT_MISSING

    def test_tool_execution_failed(self) -> None:
        """测试 ToolExecutionFailedError。"""
        cause = ValueError("boom")
        error = ToolExecutionFailedError("boom", tool_name="add", cause=cause)

        assert error.tool_name == "add"
        assert error.cause is cause
        assert error.code == ErrorCode.TOOL_EXECUTION_FAILED
