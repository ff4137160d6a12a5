"""rxrename - 文件批量重命名工具

对文件名主干依次应用正则替换和 Unicode 规范化步骤，扩展名保持不变，
逐个执行重命名并报告每个文件的结果。
"""

__version__ = "0.1.0"

# 导出流水线相关函数
from rxrename.models import (
    InvalidPathError,
    InvalidPatternError,
    NormalizationOptions,
    NormalizeStep,
    RegexStep,
    RenameResult,
    RenameStep,
    Settings,
)
from rxrename.renamer import FileRenamer, execute_rename_files, preview_name
from rxrename.resolver import resolve_steps
from rxrename.settings import load_settings, save_settings
from rxrename.transform import apply_rename, normalize

__all__ = [
    "InvalidPathError",
    "InvalidPatternError",
    "NormalizationOptions",
    "NormalizeStep",
    "RegexStep",
    "RenameResult",
    "RenameStep",
    "Settings",
    "FileRenamer",
    "execute_rename_files",
    "preview_name",
    "resolve_steps",
    "load_settings",
    "save_settings",
    "apply_rename",
    "normalize",
]
