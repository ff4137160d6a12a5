"""变换引擎

对文件名主干（不含扩展名）依次应用正则替换和 Unicode 规范化步骤。
本模块只做字符串变换，没有文件系统访问。
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable, Iterable
from functools import lru_cache

from rxrename.models import (
    InvalidPatternError,
    NormalizationOptions,
    NormalizeStep,
    RegexStep,
    RenameStep,
)

DEFAULT_NORMALIZATION = NormalizationOptions()

# ============ 规范化规则表 ============

# (开关字段, 匹配模式, 替换文本)，按顺序应用。
# colon / slash 是把半角加宽为全角（文件名中不允许出现），
# 其余规则把变体收窄为同一个标准形式。
NORMALIZATION_RULES: tuple[tuple[str, re.Pattern[str], str], ...] = (
    ("space", re.compile("　"), " "),  # 表意空格
    ("space", re.compile(" {2,}"), " "),  # 合并连续空格
    ("wave_dash", re.compile("[〜∼～]"), "〜"),  # 〜 ∼ ～ -> 〜
    ("dash", re.compile("[‐‑–—―－]"), "-"),
    ("middle_dot", re.compile("[･·•]"), "・"),  # ･ · • -> ・
    ("brackets", re.compile("（"), "("),
    ("brackets", re.compile("）"), ")"),
    ("colon", re.compile(":"), "："),  # : -> ：
    ("slash", re.compile("/"), "／"),  # / -> ／
)


def normalize(stem: str, options: NormalizationOptions | None = None) -> str:
    """规范化文件名主干

    先做 NFKC（不受开关控制），再按规则表顺序应用已启用的子规则。

    Args:
        stem: 文件名主干
        options: 子规则开关，None 表示全部启用

    Returns:
        规范化后的主干
    """
    options = options or DEFAULT_NORMALIZATION
    result = unicodedata.normalize("NFKC", stem)
    for flag, pattern, replacement in NORMALIZATION_RULES:
        if getattr(options, flag):
            result = pattern.sub(replacement, result)
    return result


# ============ 正则替换 ============

# 替换文本中的引用: $$ / ${name} / $N
_REFERENCE_RE = re.compile(r"\$(?:(\$)|\{(\w+)\}|(\d+))")


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """编译正则表达式（带缓存）

    Raises:
        InvalidPatternError: 编译失败
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


@lru_cache(maxsize=256)
def _parse_replacement(replacement: str) -> tuple[str | int | tuple[str], ...]:
    """把替换文本拆成字面量 (str)、编号引用 (int) 和命名引用 ((name,))"""
    parts: list[str | int | tuple[str]] = []
    pos = 0
    for match in _REFERENCE_RE.finditer(replacement):
        parts.append(replacement[pos : match.start()])
        dollar, braced, digits = match.groups()
        if dollar:
            parts.append("$")
        elif digits is not None:
            parts.append(int(digits))
        elif braced.isdigit():
            parts.append(int(braced))
        else:
            parts.append((braced,))
        pos = match.end()
    parts.append(replacement[pos:])
    return tuple(part for part in parts if part != "")


def _group_text(match: re.Match[str], ref: int | str) -> str:
    """取分组文本，分组不存在或未参与匹配时为空字符串"""
    try:
        text = match.group(ref)
    except IndexError:
        return ""
    return text or ""


def _make_expander(replacement: str) -> Callable[[re.Match[str]], str]:
    parts = _parse_replacement(replacement)

    def expand(match: re.Match[str]) -> str:
        out: list[str] = []
        for part in parts:
            if isinstance(part, str):
                out.append(part)
            elif isinstance(part, int):
                out.append(_group_text(match, part))
            else:
                out.append(_group_text(match, part[0]))
        return "".join(out)

    return expand


def apply_regex(stem: str, pattern: str, replacement: str) -> str:
    """对主干做全局正则替换

    从左到右替换所有不重叠的匹配，替换文本支持 $1 / ${1} / ${name} / $$。

    注意（与 Rust regex 的差异）:
      - "$1a" 解析为分组 1 后接字面量 "a"，而不是名为 "1a" 的分组；
        需要命名分组时请写 "${name}"。
      - 紧跟在非空匹配之后的空匹配也会被替换（Python 3.7+ 的 re.sub 行为），
        例如 apply_regex("abxd", "x*", "-") == "-a-b--d-"。

    Args:
        stem: 当前主干
        pattern: 正则表达式
        replacement: 替换文本

    Returns:
        替换后的主干（无匹配时原样返回）

    Raises:
        InvalidPatternError: 正则编译失败
    """
    regex = compile_pattern(pattern)
    return regex.sub(_make_expander(replacement), stem)


# ============ 流水线 ============


def apply_step(
    stem: str, step: RenameStep, options: NormalizationOptions | None = None
) -> str:
    """应用单个步骤"""
    if isinstance(step, RegexStep):
        return apply_regex(stem, step.pattern, step.replacement)
    if isinstance(step, NormalizeStep):
        return normalize(stem, options)
    raise TypeError(f"未知的步骤类型: {step!r}")


def join_extension(stem: str, extension: str) -> str:
    """拼接扩展名，扩展名为空时不带点"""
    if extension:
        return f"{stem}.{extension}"
    return stem


def apply_rename(
    stem: str,
    extension: str,
    steps: Iterable[RenameStep],
    normalization: NormalizationOptions | None = None,
) -> str:
    """按顺序应用所有步骤并拼接扩展名

    Args:
        stem: 文件名主干
        extension: 扩展名（不含点，可为空）
        steps: 步骤列表，每一步的输出是下一步的输入
        normalization: 规范化开关，作用于每个规范化步骤

    Returns:
        新文件名

    Raises:
        InvalidPatternError: 任一正则步骤编译失败（整个流水线中止）
    """
    current = stem
    for step in steps:
        current = apply_step(current, step, normalization)
    return join_extension(current, extension)
