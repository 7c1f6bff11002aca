"""测试 core/types.py - 核心类型定义。"""

from dawn_shuttle.dawn_shuttle_function_calling.src.core.types import (
    ContentType,
    ImageContent,
    Message,
    Role,
    StopReason,
    TextContent,
    ToolResultContent,
    ToolUseContent,
)


class TestRole:
    """测试 Role 枚举。"""

    def test_role_values(self) -> None:
        """测试角色值。"""
        assert Role.USER.value == "user"
        assert Role.ASSISTANT.value == "assistant"

    def test_role_is_string(self) -> None:
        """测试角色是字符串枚举。"""
        assert isinstance(Role.USER, str)
        assert Role.USER == "user"


class TestStopReason:
    """测试 StopReason。"""

    def test_parse_known(self) -> None:
        """测试解析已知停止原因。"""
        assert StopReason.parse("tool_use") is StopReason.TOOL_USE
        assert StopReason.parse("end_turn") is StopReason.END_TURN

    def test_parse_none(self) -> None:
        """测试 None。"""
        assert StopReason.parse(None) is None

    def test_parse_unknown(self) -> None:
        """测试未知值返回 None。"""
        assert StopReason.parse("something_new") is None


class TestContentBlocks:
    """测试内容块。"""

    def test_text_content(self) -> None:
        """测试文本内容块。"""
        block = TextContent(text="Hello")
        assert block.type == ContentType.TEXT
        assert block.to_dict() == {"type": "text", "text": "Hello"}

    def test_image_content(self) -> None:
        """测试图片内容块。"""
        block = ImageContent(data="aGVsbG8=", mime_type="image/jpeg")
        assert block.to_dict() == {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": "image/jpeg",
                "data": "aGVsbG8=",
            },
        }

    def test_tool_use_content(self) -> None:
        """测试工具调用内容块。"""
        block = ToolUseContent(
            id="call_1", name="getStockPrice", input={"ticker": "AAPL"}
        )
        assert block.type == ContentType.TOOL_USE
        assert block.to_dict() == {
            "type": "tool_use",
            "id": "call_1",
            "name": "getStockPrice",
            "input": {"ticker": "AAPL"},
        }

    def test_tool_result_content(self) -> None:
        """测试工具结果内容块。"""
        block = ToolResultContent(
            tool_use_id="call_1",
            content=[TextContent(text="193.50")],
        )
        assert block.is_error is False
        assert block.text == "193.50"
        assert block.to_dict() == {
            "type": "tool_result",
            "tool_use_id": "call_1",
            "content": [{"type": "text", "text": "193.50"}],
            "is_error": False,
        }


class TestMessage:
    """测试 Message。"""

    def test_user_message_string(self) -> None:
        """测试字符串内容的用户消息。"""
        msg = Message.user("Hello")
        assert msg.role == Role.USER
        assert msg.to_dict() == {"role": "user", "content": "Hello"}

    def test_blocks_from_string(self) -> None:
        """测试字符串内容转换为内容块。"""
        assert Message.user("Hi").blocks == [TextContent(text="Hi")]
        assert Message.user("").blocks == []

    def test_tool_use_message(self) -> None:
        """测试工具调用回显消息。"""
        block = ToolUseContent(id="call_1", name="add", input={"a": 1})
        msg = Message.tool_use(block)

        assert msg.role == Role.ASSISTANT
        assert msg.to_dict() == {
            "role": "assistant",
            "content": [block.to_dict()],
        }

    def test_tool_result_message(self) -> None:
        """测试工具结果消息。"""
        block = ToolResultContent(
            tool_use_id="call_1", content=[TextContent(text="2")]
        )
        msg = Message.tool_result(block)

        assert msg.role == Role.USER
        assert msg.content == [block]
