"""设置存储

使用 JSON 文件持久化步骤库、正则片段库和规范化默认值。
"""

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from rxrename.models import Settings

logger = logging.getLogger(__name__)

# 默认设置文件路径
DEFAULT_SETTINGS_PATH = Path.home() / ".rxrename" / "settings.json"
SETTINGS_ENV_VAR = "RXRENAME_SETTINGS"


class SettingsError(Exception):
    """设置读写失败"""


class SettingsIOError(SettingsError):
    """设置文件读写失败"""


class SettingsParseError(SettingsError):
    """设置文件内容无效"""


def default_settings_path() -> Path:
    """获取设置文件路径，环境变量优先"""
    env_path = os.environ.get(SETTINGS_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_SETTINGS_PATH


class SettingsStore:
    """设置存储"""

    def __init__(self, path: Path | None = None):
        """初始化设置存储

        Args:
            path: 设置文件路径，默认为 ~/.rxrename/settings.json
        """
        self.path = Path(path) if path else default_settings_path()

    def load(self) -> Settings:
        """读取设置

        Returns:
            设置对象，文件不存在时返回默认设置

        Raises:
            SettingsIOError: 读取失败
            SettingsParseError: JSON 无效
        """
        if not self.path.exists():
            logger.debug(f"设置文件不存在，使用默认设置: {self.path}")
            return Settings()

        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise SettingsIOError(str(e)) from e

        try:
            return Settings.model_validate_json(content)
        except ValidationError as e:
            raise SettingsParseError(str(e)) from e

    def save(self, settings: Settings) -> None:
        """保存设置

        Raises:
            SettingsIOError: 写入失败
        """
        content = settings.model_dump_json(by_alias=True, indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise SettingsIOError(str(e)) from e
        logger.info(f"设置已保存: {self.path}")


def load_settings(path: Path | None = None) -> Settings:
    return SettingsStore(path).load()


def save_settings(settings: Settings, path: Path | None = None) -> None:
    SettingsStore(path).save(settings)
