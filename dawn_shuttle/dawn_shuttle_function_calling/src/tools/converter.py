"""格式转换器 - 注册表工具定义与 Anthropic 工具格式之间的转换。"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..core.types import TextContent, ToolResultContent, ToolUseContent
from .types import DataType, InputSchema, ToolDefinition


class AnthropicSchemaType(str, Enum):
    """Anthropic input_schema 的类型枚举。"""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


_SCHEMA_TYPES: dict[DataType, AnthropicSchemaType] = {
    DataType.STRING: AnthropicSchemaType.STRING,
    DataType.NUMBER: AnthropicSchemaType.NUMBER,
    DataType.INTEGER: AnthropicSchemaType.INTEGER,
    DataType.BOOLEAN: AnthropicSchemaType.BOOLEAN,
    DataType.ARRAY: AnthropicSchemaType.ARRAY,
    DataType.OBJECT: AnthropicSchemaType.OBJECT,
}


@dataclass
class AnthropicInputSchema:
    """Anthropic 工具的 input_schema。"""

    type: AnthropicSchemaType
    format: str | None = None
    description: str = ""
    nullable: bool | None = None
    enum_values: list[str] | None = None
    items: AnthropicInputSchema | None = None
    properties: dict[str, AnthropicInputSchema] | None = None
    required_properties: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """转换为 API 请求中的 JSON Schema。"""
        schema: dict[str, Any] = {"type": self.type.value}

        if self.format is not None:
            schema["format"] = self.format
        if self.description:
            schema["description"] = self.description
        if self.nullable is not None:
            schema["nullable"] = self.nullable
        if self.enum_values is not None:
            schema["enum"] = list(self.enum_values)
        if self.items is not None:
            schema["items"] = self.items.to_dict()
        if self.properties is not None:
            schema["properties"] = {
                key: value.to_dict() for key, value in self.properties.items()
            }
        if self.required_properties is not None:
            schema["required"] = list(self.required_properties)

        return schema


@dataclass
class AnthropicTool:
    """Anthropic 工具定义。"""

    name: str
    description: str
    input_schema: AnthropicInputSchema

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema.to_dict(),
        }


class ToolConverter:
    """工具格式转换器。

    纯函数集合, 不做结构校验, 不合法的结构按原样映射。
    """

    @staticmethod
    def schema_to_anthropic(schema: InputSchema) -> AnthropicInputSchema:
        """递归转换输入参数结构。

        Args:
            schema: 注册表一侧的结构描述。

        Returns:
            AnthropicInputSchema: Anthropic 格式的结构描述。
        """
        return AnthropicInputSchema(
            type=_SCHEMA_TYPES[DataType(schema.type)],
            format=schema.format,
            description=schema.description or "",
            nullable=schema.nullable,
            enum_values=(
                list(schema.enum_values) if schema.enum_values is not None else None
            ),
            items=(
                ToolConverter.schema_to_anthropic(schema.items)
                if schema.items is not None
                else None
            ),
            properties=(
                {
                    key: ToolConverter.schema_to_anthropic(value)
                    for key, value in schema.properties.items()
                }
                if schema.properties is not None
                else None
            ),
            required_properties=(
                list(schema.required_properties)
                if schema.required_properties is not None
                else None
            ),
        )

    @staticmethod
    def definition_to_anthropic(definition: ToolDefinition) -> AnthropicTool:
        """将单个工具定义转换为 Anthropic 格式。"""
        return AnthropicTool(
            name=definition.name,
            description=definition.description,
            input_schema=ToolConverter.schema_to_anthropic(definition.input_schema),
        )

    @staticmethod
    def definitions_to_anthropic(
        definitions: list[ToolDefinition] | None,
    ) -> list[AnthropicTool] | None:
        """批量转换工具定义, 保持声明顺序。

        Args:
            definitions: 工具定义列表。

        Returns:
            list[AnthropicTool] | None: 没有任何工具时返回 None。
        """
        if not definitions:
            return None

        return [ToolConverter.definition_to_anthropic(d) for d in definitions]

    @staticmethod
    def tool_use_from_anthropic(block: Any) -> ToolUseContent:
        """从 Anthropic SDK 的 tool_use 内容块解析工具调用。"""
        args = getattr(block, "input", None)
        if isinstance(args, str):
            args = json.loads(args) if args else {}
        elif args is None:
            args = {}

        return ToolUseContent(
            id=getattr(block, "id", ""),
            name=getattr(block, "name", ""),
            input=dict(args),
        )

    @staticmethod
    def result_to_anthropic(
        tool_use_id: str,
        text: str,
        *,
        is_error: bool = False,
    ) -> ToolResultContent:
        """把工具的文本结果包装为 tool_result 内容块。

        Args:
            tool_use_id: 对应的工具调用 ID。
            text: 工具返回的文本。
            is_error: 是否为错误结果。

        Returns:
            ToolResultContent: 单个文本块组成的工具结果。
        """
        return ToolResultContent(
            tool_use_id=tool_use_id,
            content=[TextContent(text=text)],
            is_error=is_error,
        )


def to_anthropic_tools(
    definitions: list[ToolDefinition] | None,
) -> list[AnthropicTool] | None:
    """将注册表的工具列表转换为 Anthropic 工具列表。

    Args:
        definitions: 工具定义列表, 可以为空或 None。

    Returns:
        list[AnthropicTool] | None: 没有任何工具时返回 None。
    """
    return ToolConverter.definitions_to_anthropic(definitions)


def convert_tool_result(tool_use_id: str, text: str) -> ToolResultContent:
    """包装工具结果的便捷函数。"""
    return ToolConverter.result_to_anthropic(tool_use_id, text)
