"""
归档组装步骤模块

收集暂存目录中的文件，连同已登记的条目写出最终的 .cba 文件。
"""

from typing import Optional

from ...utils import format_size
from ...utils.logging import info, success, debug, LogStage
from cbapack.build.archiver import ArchiveError, ZipArchiver
from cbapack.build.build_context import BuildContext, IOFailureError
from .build_step import BuildStep


class ArchiveAssemblyStep(BuildStep):
    """归档组装步骤"""

    def __init__(self):
        super().__init__("assemble", "写出 CBA 归档")

    def get_progress_range(self) -> tuple[int, int]:
        return (70, 100)

    def execute(self, context: BuildContext) -> None:
        request = context.request
        dest = request.archive_path
        archiver = ZipArchiver(level=request.compression_level, forced=True)
        start, end = self.get_progress_range()

        def archive_progress(current: int, total: int, current_file: Optional[str] = None) -> None:
            if total > 0:
                context.report("写出归档", start + int(current / total * (end - start)), current_file or "")

        try:
            for name, source in context.entries.items():
                archiver.add_file(source, name)

            # 暂存目录中的文件按相对路径加入，同名条目以暂存目录为准
            work_directory = request.work_directory
            if work_directory.is_dir():
                added = archiver.add_directory(work_directory)
                debug(f"暂存目录 {work_directory} 中的 {len(added)} 个文件", stage=LogStage.ARCHIVE)

            info(f"写出归档: {dest}", stage=LogStage.ARCHIVE)
            size = archiver.create_archive(dest, archive_progress)
        except (ArchiveError, OSError) as e:
            raise IOFailureError("Error creating cba", e) from e

        context.entries = archiver.entries()
        context.output_path = dest
        context.build_stats['total_entries'] = len(context.entries)
        context.build_stats['archive_size'] = size

        success(f"归档写出完成 - {len(context.entries)} 个条目, 大小: {format_size(size)}", stage=LogStage.ARCHIVE)
