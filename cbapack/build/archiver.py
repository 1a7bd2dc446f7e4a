"""
Zip 归档器

累积归档条目并一次性写出 deflate 压缩的 zip 文件，同时提供读取与解压能力。
"""

import os
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from ..utils.paths import is_safe_archive_path, to_archive_path, walk_files


class ArchiveError(Exception):
    """归档相关错误"""
    pass


class ProgressCallback(Protocol):
    """进度回调协议"""

    def __call__(self, current: int, total: int, current_file: Optional[str] = None) -> None:
        ...


@dataclass
class ArchiveEntry:
    """归档中的单个条目"""
    name: str
    size: int
    compressed_size: int
    is_directory: bool = False


class ZipArchiver:
    """Zip 归档器

    条目以归档路径为键去重，后添加者覆盖先添加者；写出顺序为首次添加顺序。
    """

    def __init__(self, level: int = 6, forced: bool = True):
        self.level = min(9, max(1, level))
        self.forced = forced
        self._entries: Dict[str, Path] = {}

    def add_file(self, source: Union[str, Path], archive_path: str) -> bool:
        """添加单个文件

        Returns:
            bool: 是否覆盖了已存在的同名条目
        """
        name = to_archive_path(archive_path)
        if not is_safe_archive_path(name):
            raise ArchiveError(f"非法的归档路径: {archive_path}")

        replaced = name in self._entries
        self._entries[name] = Path(source)
        return replaced

    def add_directory(self, directory: Union[str, Path], prefix: str = "") -> List[str]:
        """递归添加目录下的所有文件，保留相对路径"""
        root = Path(directory)
        added = []
        for file_path in walk_files(root):
            name = to_archive_path(file_path.relative_to(root))
            if prefix:
                name = f"{prefix.rstrip('/')}/{name}"
            self.add_file(file_path, name)
            added.append(name)
        return added

    def entries(self) -> Dict[str, Path]:
        return dict(self._entries)

    def create_archive(
        self,
        dest: Union[str, Path],
        progress_callback: Optional[ProgressCallback] = None
    ) -> int:
        """写出归档文件

        先写入同目录下的临时文件，成功后原子替换目标文件。

        Returns:
            int: 归档文件大小（字节）

        Raises:
            ArchiveError: 目标已存在且未启用 forced
            OSError: 源不是普通文件、读取源文件或写入失败
        """
        dest = Path(dest)
        if dest.exists() and not self.forced:
            raise ArchiveError(f"归档文件已存在: {dest}")

        dest.parent.mkdir(parents=True, exist_ok=True)
        total = len(self._entries)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".tmp", dir=dest.parent)
        os.close(fd)
        tmp_path = Path(tmp_name)

        try:
            with zipfile.ZipFile(tmp_path, 'w', zipfile.ZIP_DEFLATED, compresslevel=self.level) as zf:
                for index, (name, source) in enumerate(self._entries.items()):
                    if progress_callback:
                        progress_callback(index, total, name)
                    if not source.is_file():
                        if source.is_dir():
                            raise IsADirectoryError(f"归档源不是普通文件: {source}")
                        raise FileNotFoundError(f"归档源文件不存在: {source}")
                    zf.write(source, name)
            os.replace(tmp_path, dest)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        if progress_callback:
            progress_callback(total, total, None)

        return dest.stat().st_size


def read_entries(archive_path: Union[str, Path]) -> List[ArchiveEntry]:
    """读取归档中的条目列表"""
    try:
        with zipfile.ZipFile(archive_path, 'r') as zf:
            return [
                ArchiveEntry(
                    name=info.filename,
                    size=info.file_size,
                    compressed_size=info.compress_size,
                    is_directory=info.is_dir(),
                )
                for info in zf.infolist()
            ]
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"不是有效的 zip 归档: {archive_path}") from e


def extract_to_directory(
    archive_path: Union[str, Path],
    output_dir: Union[str, Path],
    progress_callback: Optional[ProgressCallback] = None
) -> int:
    """解压归档到目录，跳过不安全的条目路径

    Returns:
        int: 解压的总字节数
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    extracted_bytes = 0

    try:
        with zipfile.ZipFile(archive_path, 'r') as zf:
            infos = zf.infolist()
            total_size = sum(info.file_size for info in infos)

            for info in infos:
                if progress_callback:
                    progress_callback(extracted_bytes, total_size, info.filename)

                if not is_safe_archive_path(info.filename.rstrip('/')):
                    continue

                target = output_dir / info.filename
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(target, 'wb') as dst:
                    while True:
                        chunk = src.read(64 * 1024)
                        if not chunk:
                            break
                        dst.write(chunk)

                extracted_bytes += info.file_size
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"不是有效的 zip 归档: {archive_path}") from e

    return extracted_bytes
