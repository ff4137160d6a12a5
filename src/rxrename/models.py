"""rxrename 数据模型

重命名步骤、规范化选项和保存的设置使用 Pydantic 实现 JSON 验证和序列化，
批量结果使用 dataclass。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ============ 异常 ============


class InvalidPathError(ValueError):
    """无法从路径中提取文件名"""


class InvalidPatternError(ValueError):
    """正则表达式编译失败"""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid regex pattern '{pattern}': {reason}")


# ============ 重命名步骤 ============


class RegexStep(BaseModel):
    """正则替换步骤"""

    model_config = ConfigDict(frozen=True)

    type: Literal["regex"] = "regex"
    pattern: str
    replacement: str = ""


class NormalizeStep(BaseModel):
    """Unicode 规范化步骤"""

    model_config = ConfigDict(frozen=True)

    type: Literal["normalize"] = "normalize"


# 步骤类型联合（按 type 字段区分）
RenameStep = Annotated[Union[RegexStep, NormalizeStep], Field(discriminator="type")]


class NormalizationOptions(BaseModel):
    """规范化子规则开关，每批次提供一次"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    space: bool = True  # 全角空格 -> 半角，合并连续空格
    wave_dash: bool = True  # 波浪线变体 -> U+301C
    dash: bool = True  # 连字符变体 -> "-"
    middle_dot: bool = True  # 中点变体 -> U+30FB
    brackets: bool = True  # 全角括号 -> 半角
    colon: bool = True  # ":" -> "："
    slash: bool = True  # "/" -> "／"


# ============ 结果模型 ============


@dataclass
class RenameResult:
    """单个文件的重命名结果

    success 为真时只有 new_name，为假时只有 error。
    """

    success: bool
    old_name: str
    new_name: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, old_name: str, new_name: str) -> "RenameResult":
        return cls(success=True, old_name=old_name, new_name=new_name)

    @classmethod
    def failed(cls, old_name: str, error: str) -> "RenameResult":
        return cls(success=False, old_name=old_name, error=error)

    def to_dict(self) -> dict[str, Any]:
        """转换为边界 JSON 结构（camelCase，省略缺失字段）"""
        data: dict[str, Any] = {"success": self.success, "oldName": self.old_name}
        if self.success:
            data["newName"] = self.new_name
        else:
            data["error"] = self.error
        return data


# ============ 保存的设置 ============


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegexDef(_CamelModel):
    """正则片段库条目"""

    id: str
    name: str | None = None
    pattern: str
    replacement: str = ""
    sample: str | None = None
    tags: list[str] = []


class Step(_CamelModel):
    """保存的步骤引用

    regex_id / group_ref_id / normalize 三者取其一。
    """

    regex_id: str | None = None
    group_ref_id: str | None = None
    normalize: bool = False
    enabled: bool = True


class Group(_CamelModel):
    """步骤分组"""

    id: str
    name: str
    steps: list[Step] = []


class Settings(_CamelModel):
    """持久化设置 - 对流水线而言只是输入数据"""

    groups: list[Group] = []
    ungrouped_steps: list[Step] = []
    active_group_id: str | None = None
    regex_library: list[RegexDef] = []
    normalization: NormalizationOptions = NormalizationOptions()

    def find_group(self, group_id: str) -> Group | None:
        """按 id 或名称查找分组"""
        for group in self.groups:
            if group.id == group_id:
                return group
        for group in self.groups:
            if group.name == group_id:
                return group
        return None

    def steps_for(self, group_id: str | None = None) -> list[Step]:
        """获取分组的步骤，未指定分组时返回未分组步骤

        Raises:
            KeyError: 分组不存在
        """
        if group_id is None:
            return list(self.ungrouped_steps)
        group = self.find_group(group_id)
        if group is None:
            raise KeyError(group_id)
        return list(group.steps)
