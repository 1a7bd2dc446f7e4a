"""通用工具模块"""

from .logging import (
    configure_logging,
    set_log_level,
    set_log_file,
    LogStage,
    OutputLevel,
)

from .paths import (
    ensure_directory,
    to_archive_path,
    is_safe_archive_path,
    walk_files,
    format_size,
)

__all__ = [
    # 日志相关
    "configure_logging",
    "set_log_level",
    "set_log_file",
    "LogStage",
    "OutputLevel",

    # 路径相关
    "ensure_directory",
    "to_archive_path",
    "is_safe_archive_path",
    "walk_files",
    "format_size",
]
