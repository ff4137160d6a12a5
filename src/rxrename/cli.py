"""rxrename CLI

使用 typer 实现命令行界面。
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from rxrename.clipboard import ClipboardHandler
from rxrename.models import (
    NormalizationOptions,
    NormalizeStep,
    RegexStep,
    RenameStep,
    Settings,
)
from rxrename.renamer import FileRenamer
from rxrename.resolver import resolve_settings_steps
from rxrename.settings import SettingsError, SettingsStore

app = typer.Typer(
    name="rxrename",
    help="文件批量重命名工具 - 正则替换和 Unicode 规范化",
    no_args_is_help=True,
)
console = Console()

STEP_SEPARATOR = "=>"

# ============ 公共参数 ============

FilesArg = Annotated[
    Optional[list[str]],
    typer.Argument(help="要处理的文件路径（不指定则从剪贴板读取，每行一个）"),
]
StepOpt = Annotated[
    Optional[list[str]],
    typer.Option(
        "-s",
        "--step",
        help="步骤，可重复，按顺序执行：normalize 或 '模式=>替换'",
    ),
]
GroupOpt = Annotated[
    Optional[str],
    typer.Option("-g", "--group", help="使用保存的分组（id 或名称）"),
]
SettingsOpt = Annotated[
    Optional[Path],
    typer.Option("--settings", help="设置文件路径"),
]
SpaceOpt = Annotated[
    Optional[bool], typer.Option("--space/--no-space", help="全角空格转半角并合并连续空格")
]
WaveDashOpt = Annotated[
    Optional[bool], typer.Option("--wave-dash/--no-wave-dash", help="统一波浪线")
]
DashOpt = Annotated[Optional[bool], typer.Option("--dash/--no-dash", help="统一连字符")]
MiddleDotOpt = Annotated[
    Optional[bool], typer.Option("--middle-dot/--no-middle-dot", help="统一中点")
]
BracketsOpt = Annotated[
    Optional[bool], typer.Option("--brackets/--no-brackets", help="全角括号转半角")
]
ColonOpt = Annotated[Optional[bool], typer.Option("--colon/--no-colon", help="冒号转全角")]
SlashOpt = Annotated[Optional[bool], typer.Option("--slash/--no-slash", help="斜杠转全角")]


def parse_step_spec(spec: str) -> RenameStep:
    """解析命令行步骤

    Args:
        spec: "normalize" 或 "模式=>替换"

    Returns:
        重命名步骤

    Raises:
        typer.BadParameter: 格式错误
    """
    if spec.strip().lower() == "normalize":
        return NormalizeStep()
    if STEP_SEPARATOR not in spec:
        raise typer.BadParameter(
            f"步骤格式错误: {spec!r}（应为 normalize 或 '模式{STEP_SEPARATOR}替换'）"
        )
    pattern, replacement = spec.split(STEP_SEPARATOR, 1)
    return RegexStep(pattern=pattern, replacement=replacement)


def _load_settings(settings_path: Optional[Path]) -> Settings:
    try:
        return SettingsStore(settings_path).load()
    except SettingsError as e:
        console.print(f"[red]设置读取错误:[/red] {e}")
        raise typer.Exit(1)


def _build_pipeline(
    settings: Settings, step_specs: Optional[list[str]], group: Optional[str]
) -> list[RenameStep]:
    """组合步骤：分组步骤在前，命令行步骤在后；都未指定时使用未分组步骤"""
    steps: list[RenameStep] = []

    if group or not step_specs:
        try:
            steps.extend(resolve_settings_steps(settings, group))
        except KeyError:
            console.print(f"[red]分组不存在:[/red] {group}")
            raise typer.Exit(1)

    for spec in step_specs or []:
        steps.append(parse_step_spec(spec))

    if not steps:
        console.print("[yellow]没有可执行的步骤[/yellow]")
        raise typer.Exit(1)
    return steps


def _build_normalization(settings: Settings, **overrides: Optional[bool]) -> NormalizationOptions:
    """命令行开关覆盖保存的规范化默认值"""
    update = {k: v for k, v in overrides.items() if v is not None}
    return settings.normalization.model_copy(update=update)


def _collect_files(files: Optional[list[str]]) -> list[str]:
    if files:
        return files
    if not ClipboardHandler.is_available():
        console.print("[red]错误:[/red] 无法访问剪贴板，请直接指定文件路径")
        raise typer.Exit(1)
    paths = ClipboardHandler.paste_paths()
    console.print(f"从剪贴板读取 {len(paths)} 个路径")
    return paths


# ============ 命令 ============


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="显示详细日志"),
    ] = False,
) -> None:
    """文件批量重命名工具"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def preview(
    files: FilesArg = None,
    step: StepOpt = None,
    group: GroupOpt = None,
    settings_path: SettingsOpt = None,
    space: SpaceOpt = None,
    wave_dash: WaveDashOpt = None,
    dash: DashOpt = None,
    middle_dot: MiddleDotOpt = None,
    brackets: BracketsOpt = None,
    colon: ColonOpt = None,
    slash: SlashOpt = None,
) -> None:
    """预览新文件名，不修改文件"""
    settings = _load_settings(settings_path)
    steps = _build_pipeline(settings, step, group)
    normalization = _build_normalization(
        settings,
        space=space,
        wave_dash=wave_dash,
        dash=dash,
        middle_dot=middle_dot,
        brackets=brackets,
        colon=colon,
        slash=slash,
    )

    renamer = FileRenamer()
    table = Table(title="预览")
    table.add_column("原文件名")
    table.add_column("新文件名", style="cyan")

    for file_path in _collect_files(files):
        old_name = Path(file_path).name or file_path
        new_name = renamer.preview(file_path, steps, normalization)
        table.add_row(
            escape(old_name),
            escape(new_name) if new_name != old_name else "[dim]（不变）[/dim]",
        )

    console.print(table)


@app.command()
def rename(
    files: FilesArg = None,
    step: StepOpt = None,
    group: GroupOpt = None,
    settings_path: SettingsOpt = None,
    space: SpaceOpt = None,
    wave_dash: WaveDashOpt = None,
    dash: DashOpt = None,
    middle_dot: MiddleDotOpt = None,
    brackets: BracketsOpt = None,
    colon: ColonOpt = None,
    slash: SlashOpt = None,
    yes: Annotated[
        bool,
        typer.Option("-y", "--yes", help="跳过确认"),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="以 JSON 输出结果"),
    ] = False,
) -> None:
    """执行批量重命名"""
    settings = _load_settings(settings_path)
    steps = _build_pipeline(settings, step, group)
    normalization = _build_normalization(
        settings,
        space=space,
        wave_dash=wave_dash,
        dash=dash,
        middle_dot=middle_dot,
        brackets=brackets,
        colon=colon,
        slash=slash,
    )

    paths = _collect_files(files)
    if not paths:
        console.print("[yellow]没有要重命名的文件[/yellow]")
        return

    if not yes:
        typer.confirm(f"重命名 {len(paths)} 个文件？", abort=True)

    results = FileRenamer().rename_batch(paths, steps, normalization)

    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
        return

    table = Table(title="重命名结果")
    table.add_column("原文件名")
    table.add_column("新文件名 / 原因")
    table.add_column("状态")

    for result in results:
        if result.success:
            table.add_row(escape(result.old_name), escape(result.new_name or ""), "[green]✓[/green]")
        else:
            table.add_row(escape(result.old_name), escape(result.error or ""), "[red]✗[/red]")

    console.print(table)

    success_count = sum(1 for r in results if r.success)
    console.print(f"\n[green]成功:[/green] {success_count}")
    console.print(f"[red]失败:[/red] {len(results) - success_count}")


@app.command()
def library(
    settings_path: SettingsOpt = None,
) -> None:
    """显示保存的分组和正则片段库"""
    settings = _load_settings(settings_path)

    if not settings.groups and not settings.regex_library:
        console.print("没有保存的分组或正则")
        return

    groups_table = Table(title="分组")
    groups_table.add_column("ID", style="cyan")
    groups_table.add_column("名称")
    groups_table.add_column("步骤数")
    for group in settings.groups:
        active = " *" if group.id == settings.active_group_id else ""
        groups_table.add_row(group.id, group.name + active, str(len(group.steps)))
    console.print(groups_table)

    regex_table = Table(title="正则片段库")
    regex_table.add_column("ID", style="cyan")
    regex_table.add_column("名称")
    regex_table.add_column("模式")
    regex_table.add_column("替换")
    for rx in settings.regex_library:
        regex_table.add_row(
            escape(rx.id), escape(rx.name or "-"), escape(rx.pattern), escape(rx.replacement)
        )
    console.print(regex_table)


if __name__ == "__main__":
    app()
