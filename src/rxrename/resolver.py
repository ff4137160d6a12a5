"""步骤解析器

把保存的步骤引用（正则库 id、分组引用、规范化标记）展开为扁平的重命名步骤列表。
"""

import logging

from rxrename.models import (
    Group,
    NormalizeStep,
    RegexDef,
    RegexStep,
    RenameStep,
    Settings,
    Step,
)

logger = logging.getLogger(__name__)


def resolve_steps(
    steps: list[Step],
    regex_library: list[RegexDef],
    groups: list[Group],
) -> list[RenameStep]:
    """展开步骤引用

    禁用的步骤被跳过；分组引用递归展开，同一次解析中已访问的分组不再展开，
    因此循环引用会终止。找不到的正则或分组被忽略。

    Args:
        steps: 保存的步骤
        regex_library: 正则片段库
        groups: 所有分组

    Returns:
        扁平的重命名步骤列表
    """
    regex_by_id = {rx.id: rx for rx in regex_library}
    group_by_id = {g.id: g for g in groups}
    resolved: list[RenameStep] = []
    visited: set[str] = set()

    def resolve(current: list[Step]) -> None:
        for step in current:
            if not step.enabled:
                continue

            if step.normalize:
                resolved.append(NormalizeStep())

            elif step.regex_id:
                rx = regex_by_id.get(step.regex_id)
                if rx is None:
                    logger.debug(f"正则不存在: {step.regex_id}")
                    continue
                resolved.append(RegexStep(pattern=rx.pattern, replacement=rx.replacement))

            elif step.group_ref_id:
                if step.group_ref_id in visited:
                    logger.debug(f"跳过循环引用: {step.group_ref_id}")
                    continue
                group = group_by_id.get(step.group_ref_id)
                if group is None:
                    logger.debug(f"分组不存在: {step.group_ref_id}")
                    continue
                visited.add(step.group_ref_id)
                resolve(group.steps)

    resolve(steps)
    return resolved


def resolve_settings_steps(
    settings: Settings, group_id: str | None = None
) -> list[RenameStep]:
    """解析设置中某个分组（或未分组步骤）的步骤

    Raises:
        KeyError: 分组不存在
    """
    return resolve_steps(
        settings.steps_for(group_id), settings.regex_library, settings.groups
    )
