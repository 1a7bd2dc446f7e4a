"""
Build 命令实现

从 YAML 配置构建 CBA 归档。
"""

import traceback
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from ...build import ArchiveBuilder, BuildError
from ...config import load_config, ArchiveRequest, ConfigError, ConfigValidationError
from ...utils import format_size
from ...utils.logging import set_log_level, set_log_file, OutputLevel


console = Console()


def build_command(
    config: str = typer.Option(..., "--config", "-c", help="配置文件路径"),
    final_name: Optional[str] = typer.Option(None, "--final-name", help="覆盖配置中的归档基础名"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="日志输出文件"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出详细调试日志 (DEBUG 级别)"),
) -> None:
    """构建 CBA 归档

    示例:
        cbapack build -c cba.yaml
        cbapack build -c cba.yaml --final-name my-cba-1.0 --log-file build.log
    """
    config_path = Path(config)

    if verbose:
        set_log_level(OutputLevel.DEBUG)

    if log_file:
        try:
            set_log_file(log_file)
        except OSError:
            console.print(f"[yellow]无法写入日志文件: {log_file}[/yellow]")

    try:
        console.print(f"[cyan]正在加载配置文件[/cyan]: {config_path}")
        config_obj = load_config(config_path)
        request = config_obj.to_request()
        if final_name:
            request = ArchiveRequest.model_validate({**dict(request), "final_name": final_name})
    except ConfigValidationError as e:
        console.print("[red]配置验证失败:[/red]")
        console.print(e.format_errors())
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]参数无效[/red]: {e.errors()[0]['msg']}")
        raise typer.Exit(1)
    except ConfigError as e:
        console.print(f"[red]配置错误[/red]: {e}")
        raise typer.Exit(1)

    try:
        result = ArchiveBuilder().build(request, config_obj.descriptors())
    except BuildError as e:
        console.print(f"[red]✗ 构建失败[/red]: {e}")
        if log_file:
            console.print(f"[yellow]详细错误信息:[/yellow]\n{traceback.format_exc()}")
        raise typer.Exit(1)

    console.print(f"[green]✓ CBA 构建完成[/green]: {result.produced_file_path}")
    console.print(f"[blue]条目数量[/blue]: {len(result.entries)}")
    console.print(f"[blue]文件大小[/blue]: {format_size(result.size)}")
