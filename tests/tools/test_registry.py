"""工具注册表测试。"""

from __future__ import annotations

from typing import Any

import pytest

from dawn_shuttle.dawn_shuttle_function_calling.src.tools import (
    DataType,
    DuplicateToolError,
    FunctionTool,
    InputSchema,
    Tool,
    ToolNotFoundError,
    ToolRegistry,
)


class EchoTool(Tool):
    """回显工具。"""

    name = "echo"
    description = "Echo the input"
    input_schema = InputSchema.object(
        {"text": InputSchema(type=DataType.STRING)},
        required=["text"],
    )

    async def execute(self, text: str) -> str:
        return text


def get_stock_price(ticker: str) -> str:
    """Get the latest stock price."""
    return {"AAPL": "193.50"}.get(ticker, "unknown")


class TestToolRegistry:
    """ToolRegistry 测试。"""

    def test_register_tool_instance(self) -> None:
        """测试注册工具对象。"""
        registry = ToolRegistry()
        tool = registry.register(EchoTool())

        assert registry.has("echo")
        assert registry.get("echo") is tool
        assert len(registry) == 1

    def test_register_function(self) -> None:
        """测试注册函数, 名称和描述取自函数。"""
        registry = ToolRegistry()
        tool = registry.register(
            get_stock_price,
            input_schema={
                "type": "object",
                "properties": {"ticker": {"type": "string"}},
                "required": ["ticker"],
            },
        )

        assert isinstance(tool, FunctionTool)
        assert tool.name == "get_stock_price"
        assert tool.description == "Get the latest stock price."
        assert tool.input_schema is not None
        assert tool.input_schema.required_properties == ["ticker"]

    def test_register_duplicate(self) -> None:
        """测试重复注册。"""
        registry = ToolRegistry()
        registry.register(EchoTool())

        with pytest.raises(DuplicateToolError):
            registry.register(EchoTool())

    def test_register_override(self) -> None:
        """测试覆盖注册。"""
        registry = ToolRegistry()
        registry.register(EchoTool())
        replacement = EchoTool()
        registry.register(replacement, override=True)

        assert registry.get("echo") is replacement

    def test_add_chaining(self) -> None:
        """测试链式构建。"""
        registry = (
            ToolRegistry()
            .add("getStockPrice", get_stock_price, description="Price")
            .add("echo", lambda text: text)
        )

        assert registry.list_tools() == ["getStockPrice", "echo"]

    def test_case_insensitive(self) -> None:
        """测试不区分大小写。"""
        registry = ToolRegistry(case_sensitive=False)
        registry.register(EchoTool())

        assert "ECHO" in registry
        assert registry["Echo"].name == "echo"

    def test_unregister(self) -> None:
        """测试注销。"""
        registry = ToolRegistry()
        registry.register(EchoTool())
        registry.unregister("echo")

        assert "echo" not in registry
        with pytest.raises(ToolNotFoundError):
            registry.unregister("echo")

    def test_get_missing(self) -> None:
        """测试获取不存在的工具。"""
        with pytest.raises(ToolNotFoundError, match="missing"):
            ToolRegistry().get("missing")

    def test_all_tools_empty(self) -> None:
        """测试空注册表的工具列表为 None。"""
        registry = ToolRegistry()

        assert registry.all_tools is None
        assert registry.anthropic_tools is None

    def test_all_tools_in_order(self) -> None:
        """测试工具列表保持注册顺序。"""
        registry = ToolRegistry()
        registry.register(EchoTool())
        registry.register(get_stock_price, name="getStockPrice")

        definitions = registry.all_tools
        assert definitions is not None
        assert [d.name for d in definitions] == ["echo", "getStockPrice"]

        tools = registry.anthropic_tools
        assert tools is not None
        assert tools[0].input_schema.required_properties == ["text"]
        assert tools[1].description == "Get the latest stock price."

    def test_merge(self) -> None:
        """测试合并注册表。"""
        first = ToolRegistry()
        first.register(EchoTool())
        second = ToolRegistry()
        second.register(get_stock_price)

        first.merge(second)
        assert first.list_tools() == ["echo", "get_stock_price"]

    def test_truthiness_follows_length(self) -> None:
        """测试真值由工具数量决定。"""
        registry = ToolRegistry()
        assert not registry

        registry.register(EchoTool())
        assert registry

    def test_repr(self) -> None:
        """测试 repr。"""
        registry = ToolRegistry()
        registry.register(EchoTool())
        assert repr(registry) == "ToolRegistry([echo])"


class TestRegistryExecute:
    """ToolRegistry.execute 测试。"""

    @pytest.mark.asyncio
    async def test_execute_async_tool(self) -> None:
        """测试执行异步工具。"""
        registry = ToolRegistry()
        registry.register(EchoTool())

        assert await registry.execute("echo", {"text": "hi"}) == "hi"

    @pytest.mark.asyncio
    async def test_execute_sync_function(self) -> None:
        """测试执行同步函数。"""
        registry = ToolRegistry()
        registry.register(get_stock_price, name="getStockPrice")

        result = await registry.execute("getStockPrice", {"ticker": "AAPL"})
        assert result == "193.50"

    @pytest.mark.asyncio
    async def test_execute_structured_result(self) -> None:
        """测试结构化结果转换为 JSON 文本。"""
        registry = ToolRegistry()

        async def quote(ticker: str) -> dict[str, Any]:
            return {"ticker": ticker, "price": 193.5}

        registry.register(quote)

        result = await registry.execute("quote", {"ticker": "AAPL"})
        assert result == '{"ticker": "AAPL", "price": 193.5}'

    @pytest.mark.asyncio
    async def test_execute_unknown_tool(self) -> None:
        """测试执行不存在的工具返回错误文本。"""
        result = await ToolRegistry().execute("missing", {})
        assert result == "Error: Tool 'missing' not found"
