"""工具模块核心类型定义 - 注册表一侧的工具描述。"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DataType(str, Enum):
    """参数数据类型。"""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


def _parse_type(value: Any) -> tuple[DataType, bool]:
    """解析 type 字段, 返回 (类型, 是否含 null)。"""
    if not isinstance(value, list):
        return DataType(value), False

    types = [t for t in value if t != "null"]
    if len(types) != 1:
        raise ValueError(f"Unsupported union type {value!r}")
    return DataType(types[0]), len(types) != len(value)


def _from_child(cls: type[InputSchema], key: str, data: dict[str, Any]) -> InputSchema:
    try:
        return cls.from_dict(data)
    except ValueError as e:
        raise ValueError(f"Invalid schema for '{key}': {e}") from e


@dataclass
class InputSchema:
    """工具输入参数的结构描述。

    Attributes:
        type: 数据类型。
        format: 格式提示(如 "date-time")。
        description: 描述。
        nullable: 是否可为空。
        enum_values: 枚举值列表。
        items: 数组元素结构(type 为 array 时)。
        properties: 对象属性(type 为 object 时)。
        required_properties: 必需属性名称列表。
    """

    type: DataType
    format: str | None = None
    description: str | None = None
    nullable: bool | None = None
    enum_values: list[str] | None = None
    items: InputSchema | None = None
    properties: dict[str, InputSchema] | None = None
    required_properties: list[str] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InputSchema:
        """从 JSON Schema 风格的字典创建。

        ["string", "null"] 形式的联合类型视为可为空的单一类型。

        Args:
            data: 含 type/properties/items/required 等键的字典。

        Returns:
            InputSchema: 结构描述。

        Raises:
            ValueError: 类型不受支持, 错误信息包含出错的属性路径。
        """
        data_type, nullable = _parse_type(data.get("type", "object"))
        items = data.get("items")
        properties = data.get("properties")
        enum_values = data.get("enum")

        return cls(
            type=data_type,
            format=data.get("format"),
            description=data.get("description"),
            nullable=True if nullable else data.get("nullable"),
            enum_values=list(enum_values) if enum_values is not None else None,
            items=_from_child(cls, "items", items) if items is not None else None,
            properties=(
                {key: _from_child(cls, key, value) for key, value in properties.items()}
                if properties is not None
                else None
            ),
            required_properties=(
                list(data["required"]) if data.get("required") is not None else None
            ),
        )

    @classmethod
    def object(
        cls,
        properties: dict[str, InputSchema],
        *,
        required: list[str] | None = None,
        description: str | None = None,
    ) -> InputSchema:
        """创建 object 类型结构的便捷方法。"""
        return cls(
            type=DataType.OBJECT,
            description=description,
            properties=properties,
            required_properties=required,
        )


@dataclass
class ToolDefinition:
    """注册表中的工具描述。

    Attributes:
        name: 工具名称(唯一标识)。
        description: 工具描述。
        input_schema: 输入参数结构。
        metadata: 元数据(标签等)。
    """

    name: str
    description: str
    input_schema: InputSchema = field(
        default_factory=lambda: InputSchema(type=DataType.OBJECT, properties={})
    )
    metadata: dict[str, Any] = field(default_factory=dict)


class ToolExecutionStatus(str, Enum):
    """工具执行状态。"""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    TIMEOUT = "timeout"


@dataclass
class ToolExecution:
    """工具执行记录。

    Attributes:
        name: 工具名称。
        arguments: 调用参数。
        status: 执行状态。
        output: 文本形式的执行结果。
        error: 失败时的异常。
        duration_ms: 执行耗时(毫秒)。
    """

    name: str
    arguments: dict[str, Any]
    status: ToolExecutionStatus = ToolExecutionStatus.PENDING
    output: str = ""
    error: Exception | None = None
    duration_ms: float | None = None

    @property
    def success(self) -> bool:
        return self.status == ToolExecutionStatus.SUCCESS


# 类型别名
ToolHandler = Callable[..., Any]
"""工具处理函数类型, 同步或异步, 以关键字参数接收调用参数。"""
