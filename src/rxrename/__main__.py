"""rxrename CLI 入口点"""

import sys

from rxrename.cli import app


def setup_utf8_output():
    """Windows 下把 stdout/stderr 切换为 UTF-8

    文件名常含日文全角字符，老版 PowerShell 的默认代码页会输出乱码或报错。
    """
    if sys.platform != "win32":
        return
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding="utf-8", errors="replace")


def main():
    """CLI 主入口"""
    setup_utf8_output()
    app(prog_name="rxrename")


if __name__ == "__main__":
    main()
