"""批量重命名器

拆分路径、对主干运行变换流水线、执行重命名，并为每个输入返回一个结果。
文件按输入顺序逐个处理，单个文件的失败不影响其他文件。
"""

import logging
import os
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from rxrename.models import (
    InvalidPathError,
    InvalidPatternError,
    NormalizationOptions,
    RenameResult,
    RenameStep,
)
from rxrename.transform import apply_rename

logger = logging.getLogger(__name__)

INVALID_PATH = "Invalid file path"
NAME_UNCHANGED = "Name unchanged"
NAME_HAS_SEPARATOR = "New name contains a path separator"

# 新文件名中不允许出现的路径分隔符
PATH_SEPARATORS = {"/", os.sep} | ({os.altsep} if os.altsep else set())

RenameFunc = Callable[[Path, Path], None]


def split_filename(path: str | Path) -> tuple[Path, str, str, str]:
    """拆分路径

    扩展名是最后一个点之后的部分；点位于开头（隐藏文件）或末尾时视为没有扩展名，
    主干即完整文件名。

    Args:
        path: 文件路径

    Returns:
        (父目录, 文件名, 主干, 扩展名)

    Raises:
        InvalidPathError: 无法提取文件名
    """
    raw = str(path)
    if not raw:
        raise InvalidPathError(INVALID_PATH)

    file_path = Path(raw)
    name = file_path.name
    if name in ("", ".", ".."):
        raise InvalidPathError(INVALID_PATH)

    dot = name.rfind(".")
    if 0 < dot < len(name) - 1:
        stem, extension = name[:dot], name[dot + 1 :]
    else:
        stem, extension = name, ""

    return file_path.parent, name, stem, extension


def _same_file(src: Path, dst: Path) -> bool:
    try:
        return os.path.samefile(src, dst)
    except OSError:
        return False


def rename_path(src: Path, dst: Path) -> None:
    """默认的文件系统重命名

    目标已存在时拒绝覆盖（仅大小写不同的同一文件除外）。

    Raises:
        OSError: 重命名失败
    """
    if dst.exists() and not _same_file(src, dst):
        raise FileExistsError(f"Destination already exists: {dst}")
    os.rename(src, dst)


class FileRenamer:
    """文件重命名器"""

    def __init__(self, rename_func: RenameFunc | None = None):
        """初始化重命名器

        Args:
            rename_func: 重命名函数 (src, dst)，默认为 rename_path
        """
        self.rename_func = rename_func or rename_path

    def rename_batch(
        self,
        files: Iterable[str | Path],
        steps: Sequence[RenameStep],
        normalization: NormalizationOptions | None = None,
    ) -> list[RenameResult]:
        """批量重命名文件

        Args:
            files: 文件路径列表
            steps: 重命名步骤
            normalization: 规范化开关，作用于本批次所有规范化步骤

        Returns:
            结果列表，长度和顺序与输入一致
        """
        steps = list(steps)
        results = [self.rename_one(f, steps, normalization) for f in files]

        success_count = sum(1 for r in results if r.success)
        logger.info(f"批量重命名完成: 成功 {success_count}, 失败 {len(results) - success_count}")
        return results

    def rename_one(
        self,
        file_path: str | Path,
        steps: Sequence[RenameStep],
        normalization: NormalizationOptions | None = None,
    ) -> RenameResult:
        """重命名单个文件，所有错误都记录到结果中"""
        try:
            parent, old_name, stem, extension = split_filename(file_path)
        except InvalidPathError:
            logger.warning(f"无效路径: {file_path!r}")
            return RenameResult.failed(str(file_path), INVALID_PATH)

        try:
            new_name = apply_rename(stem, extension, steps, normalization)
        except InvalidPatternError as e:
            logger.warning(f"正则编译失败 {old_name}: {e}")
            return RenameResult.failed(old_name, str(e))

        if new_name == old_name:
            logger.debug(f"名称未变化: {old_name}")
            return RenameResult.failed(old_name, NAME_UNCHANGED)

        if any(sep in new_name for sep in PATH_SEPARATORS):
            logger.warning(f"新文件名包含路径分隔符: {old_name} -> {new_name}")
            return RenameResult.failed(old_name, NAME_HAS_SEPARATOR)

        src = Path(file_path)
        tgt = parent / new_name
        try:
            self.rename_func(src, tgt)
        except OSError as e:
            logger.error(f"重命名失败 {src} -> {tgt}: {e}")
            return RenameResult.failed(old_name, str(e))

        logger.info(f"重命名: {old_name} -> {new_name}")
        return RenameResult.ok(old_name, new_name)

    def preview(
        self,
        file_path: str | Path,
        steps: Sequence[RenameStep],
        normalization: NormalizationOptions | None = None,
    ) -> str:
        """计算新文件名但不修改文件系统

        正则编译失败或路径无效时返回原文件名。
        """
        try:
            _, old_name, stem, extension = split_filename(file_path)
        except InvalidPathError:
            return str(file_path)

        try:
            return apply_rename(stem, extension, steps, normalization)
        except InvalidPatternError as e:
            logger.warning(f"预览失败 {old_name}: {e}")
            return old_name


def execute_rename_files(
    files: Iterable[str | Path],
    steps: Sequence[RenameStep],
    normalization: NormalizationOptions | None = None,
) -> list[RenameResult]:
    """批量重命名入口，从不因单个文件的错误而抛出异常"""
    return FileRenamer().rename_batch(files, steps, normalization)


def preview_name(
    file_path: str | Path,
    steps: Sequence[RenameStep],
    normalization: NormalizationOptions | None = None,
) -> str:
    """预览单个文件的新文件名"""
    return FileRenamer().preview(file_path, steps, normalization)
