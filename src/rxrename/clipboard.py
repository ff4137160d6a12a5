"""剪贴板处理器

使用 pyperclip 从剪贴板读取待重命名的文件路径。
"""

import pyperclip


class ClipboardHandler:
    """剪贴板处理器"""

    @staticmethod
    def paste_paths() -> list[str]:
        """从剪贴板读取文件路径，每行一个

        去掉首尾空白和包裹路径的引号，忽略空行。

        Returns:
            文件路径列表
        """
        paths: list[str] = []
        for line in pyperclip.paste().splitlines():
            line = line.strip().strip('"').strip("'")
            if line:
                paths.append(line)
        return paths

    @staticmethod
    def is_available() -> bool:
        """检查系统剪贴板是否可访问（无剪贴板程序时 pyperclip 会抛出异常）"""
        try:
            pyperclip.paste()
        except pyperclip.PyperclipException:
            return False
        return True
