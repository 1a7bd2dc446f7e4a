"""
构建器主类

对外提供 ArchiveBuilder.build(request, descriptors)，内部使用管道组织构建步骤。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from ..config.schema import ArchiveRequest, DependencyDescriptor
from .build_context import ProgressCallback
from .build_pipeline import BuildPipeline


@dataclass
class ArchiveOutput:
    """构建结果

    只记录生成文件的路径，调用方负责将其登记为本次构建的产物。
    """
    produced_file_path: Path
    entries: List[str] = field(default_factory=list)
    size: int = 0
    build_time: float = 0.0


class ArchiveBuilder:
    """CBA 归档构建器

    每次调用相互独立，不在调用之间保存状态。
    """

    def __init__(self, pipeline: Optional[BuildPipeline] = None):
        self.pipeline = pipeline or BuildPipeline()

    def build(
        self,
        request: ArchiveRequest,
        descriptors: Sequence[DependencyDescriptor],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> ArchiveOutput:
        """构建 CBA 归档

        Args:
            request: 构建请求
            descriptors: 已解析的依赖列表
            progress_callback: 进度回调函数

        Returns:
            ArchiveOutput: 生成的归档信息

        Raises:
            NoDependenciesError: 没有可打包的 compile 依赖
            UnresolvedArtifactError: 依赖未解析到本地文件
            MissingManifestError: 清单文件不存在
            IOFailureError: 文件系统操作失败
        """
        context = self.pipeline.execute(request, descriptors, progress_callback)
        stats = context.build_stats

        return ArchiveOutput(
            produced_file_path=context.output_path or request.archive_path,
            entries=list(context.entries),
            size=stats.get('archive_size', 0),
            build_time=stats['end_time'] - stats['start_time'],
        )

    def get_pipeline(self) -> BuildPipeline:
        """获取构建管道，用于自定义构建流程"""
        return self.pipeline


def build_archive(
    request: ArchiveRequest,
    descriptors: Sequence[DependencyDescriptor],
    progress_callback: Optional[ProgressCallback] = None,
) -> ArchiveOutput:
    """便捷函数：使用默认管道构建归档"""
    return ArchiveBuilder().build(request, descriptors, progress_callback)
