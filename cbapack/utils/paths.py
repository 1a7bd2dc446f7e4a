"""
路径工具

提供路径处理相关的工具函数。
"""

import os
from pathlib import Path, PurePosixPath
from typing import Iterator, Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """确保目录存在

    Args:
        path: 目录路径

    Returns:
        Path: 目录路径
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def to_archive_path(path: Union[str, Path]) -> str:
    """转换为归档内路径（统一使用正斜杠，不带前导斜杠）"""
    return str(PurePosixPath(*Path(path).parts)).lstrip('/')


def is_safe_archive_path(name: str) -> bool:
    """检查归档条目路径是否安全（防止目录穿越）"""
    if not name or name.startswith('/') or '\\' in name:
        return False
    parts = PurePosixPath(name).parts
    return bool(parts) and '..' not in parts


def walk_files(root: Path) -> Iterator[Path]:
    """按排序后的顺序递归遍历目录下的所有文件"""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            yield Path(dirpath) / filename


def format_size(size_bytes: int) -> str:
    """格式化文件大小

    Args:
        size_bytes: 字节数

    Returns:
        str: 格式化的大小字符串
    """
    if size_bytes == 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB"]
    unit_index = 0
    size = float(size_bytes)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    if unit_index == 0:
        return f"{int(size)} {units[unit_index]}"
    return f"{size:.1f} {units[unit_index]}"
