"""
Extract 命令实现

将 CBA 归档解压到目录。
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from ...build.archiver import ArchiveError, extract_to_directory
from ...utils import format_size


console = Console()


def extract_command(
    archive: str = typer.Argument(..., help="CBA 归档路径"),
    output_dir: str = typer.Option("./extracted", "--dir", "-d", help="输出目录"),
    force: bool = typer.Option(False, "--force", "-f", help="输出目录非空时仍然解压")
) -> None:
    """解压 CBA 归档

    示例:
        cbapack extract target/my-cba-1.0.cba
        cbapack extract target/my-cba-1.0.cba -d output/
    """
    archive_path = Path(archive)
    output_path = Path(output_dir)

    if not archive_path.is_file():
        console.print(f"[red]归档文件不存在: {archive_path}[/red]")
        raise typer.Exit(1)

    if output_path.exists() and any(output_path.iterdir()) and not force:
        console.print(f"[red]输出目录不为空: {output_path}[/red]")
        console.print("使用 --force 参数强制覆盖")
        raise typer.Exit(1)

    console.print(f"正在解压: [cyan]{archive_path}[/cyan]")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("解压中...", total=None)

            def on_progress(current, total, current_file=None):
                if current_file:
                    progress.update(task, description=f"解压: {current_file}")

            extracted = extract_to_directory(archive_path, output_path, on_progress)
    except (ArchiveError, OSError) as e:
        console.print(f"[red]解压失败: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"✓ 解压完成: [green]{output_path}[/green] ({format_size(extracted)})")
