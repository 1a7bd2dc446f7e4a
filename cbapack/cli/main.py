"""
cbapack CLI 主入口

提供 build/validate/inspect/extract/example 等命令。
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .. import __version__
from ..utils.logging import OutputLevel, configure_logging
from .commands import build, validate, inspect, extract


app = typer.Typer(
    name="cbapack",
    help="cbapack - Composite Bundle Archive (.cba) 构建工具",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """显示版本信息"""
    if value:
        console.print(f"cbapack v{__version__}")
        raise typer.Exit()


def verbose_callback(verbose: bool) -> None:
    """配置详细输出"""
    configure_logging(level=OutputLevel.DEBUG if verbose else OutputLevel.INFO)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="显示版本信息"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        callback=verbose_callback,
        help="启用详细输出"
    )
) -> None:
    """cbapack - Composite Bundle Archive (.cba) 构建工具

    使用 --help 查看可用命令的详细信息。
    """
    pass


app.command("build", help="构建 CBA 归档")(build.build_command)
app.command("validate", help="验证配置文件")(validate.validate_command)
app.command("inspect", help="查看 CBA 归档内容")(inspect.inspect_command)
app.command("extract", help="解压 CBA 归档")(extract.extract_command)


@app.command("example")
def example_command(
    output: str = typer.Option(
        "cba.yaml",
        "--output", "-o",
        help="输出配置文件路径"
    )
) -> None:
    """生成示例配置文件"""
    from ..config import save_config, ConfigError
    from ..config.schema import ArchiveModel, CbaConfig, DependencyDescriptor, ProjectModel

    config = CbaConfig(
        archive=ArchiveModel(
            output_directory=Path("target"),
            final_name="example-cba-1.0.0",
        ),
        project=ProjectModel(
            group_id="com.example",
            artifact_id="example-cba",
            version="1.0.0",
            pom_file=Path("pom.xml"),
        ),
        dependencies=[
            DependencyDescriptor(
                group_id="com.example",
                artifact_id="example-bundle",
                version="1.0.0",
                scope="compile",
                file=Path("lib/example-bundle-1.0.0.jar"),
            ),
        ],
    )

    try:
        save_config(config, output)
    except ConfigError as e:
        console.print(f"[red]生成示例配置失败: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"✓ 示例配置文件已生成: [green]{output}[/green]")
    console.print("请根据需要修改配置文件，然后运行:")
    console.print(f"  [cyan]cbapack build -c {output}[/cyan]")


if __name__ == "__main__":
    app()
