"""
Inspect 命令实现

列出 CBA 归档中的条目。
"""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ...build.archiver import ArchiveError, read_entries
from ...utils import format_size


console = Console()


def inspect_command(
    archive: str = typer.Argument(..., help="CBA 归档路径"),
    json_output: bool = typer.Option(False, "--json", help="输出 JSON 格式"),
) -> None:
    """查看 CBA 归档内容

    示例:
        cbapack inspect target/my-cba-1.0.cba
        cbapack inspect target/my-cba-1.0.cba --json
    """
    archive_path = Path(archive)

    if not archive_path.is_file():
        console.print(f"[red]归档文件不存在: {archive_path}[/red]")
        raise typer.Exit(1)

    try:
        entries = read_entries(archive_path)
    except ArchiveError as e:
        console.print(f"[red]读取归档失败: {e}[/red]")
        raise typer.Exit(1)

    files = [e for e in entries if not e.is_directory]

    if json_output:
        data = {
            "archive": str(archive_path),
            "entries": [
                {"name": e.name, "size": e.size, "compressed_size": e.compressed_size}
                for e in files
            ],
        }
        typer.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return

    table = Table(title=f"{archive_path.name}")
    table.add_column("条目", style="cyan")
    table.add_column("大小", style="green", justify="right")
    table.add_column("压缩后", style="yellow", justify="right")

    for entry in files:
        table.add_row(entry.name, format_size(entry.size), format_size(entry.compressed_size))

    console.print(table)
    console.print(f"共 {len(files)} 个条目, 总大小 {format_size(sum(e.size for e in files))}")
