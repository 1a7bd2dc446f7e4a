"""
构建管道模块

使用管道模式协调构建步骤的执行。
"""

import time
from typing import List, Optional, Sequence

from ..config.schema import ArchiveRequest, DependencyDescriptor
from ..utils.logging import info, debug, success, error, LogStage
from .build_context import BuildContext, BuildError, IOFailureError, ProgressCallback
from .steps.build_step import BuildStep
from .steps.dependency_staging_step import DependencyStagingStep
from .steps.manifest_step import ManifestStep
from .steps.maven_metadata_step import MavenMetadataStep
from .steps.archive_assembly_step import ArchiveAssemblyStep


class BuildPipeline:
    """构建管道，负责按顺序执行构建步骤"""

    def __init__(self):
        self._steps: List[BuildStep] = []
        self._init_default_steps()

    def _init_default_steps(self):
        self._steps = [
            DependencyStagingStep(),
            ManifestStep(),
            MavenMetadataStep(),
            ArchiveAssemblyStep(),
        ]

    def add_step(self, step: BuildStep, position: Optional[int] = None):
        """添加构建步骤"""
        if position is None:
            self._steps.append(step)
        else:
            self._steps.insert(position, step)

    def remove_step(self, step_name: str):
        """移除构建步骤"""
        self._steps = [step for step in self._steps if step.name != step_name]

    def get_steps(self) -> List[BuildStep]:
        """获取所有构建步骤"""
        return self._steps.copy()

    def execute(
        self,
        request: ArchiveRequest,
        descriptors: Sequence[DependencyDescriptor],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BuildContext:
        """执行构建管道

        Returns:
            BuildContext: 构建上下文，包含所有构建结果

        Raises:
            BuildError: 任一步骤失败，异常原样向上传播
        """
        context = BuildContext(
            request=request,
            descriptors=list(descriptors or []),
            progress_callback=progress_callback,
        )
        context.build_stats['start_time'] = time.time()

        info("============== Executing CBA build ==============", stage=LogStage.INIT)
        debug(f"Work Directory: {request.work_directory}", stage=LogStage.INIT)
        debug(f"Output Directory: {request.output_directory}", stage=LogStage.INIT)
        debug(f"Composite Bundle Manifest File: {request.manifest_file}", stage=LogStage.INIT)
        debug(f"Final Name: {request.final_name}", stage=LogStage.INIT)

        try:
            for step in self._steps:
                debug(f"执行步骤: {step.description}", stage=LogStage.INIT)
                step.execute(context)
        except BuildError as e:
            error(f"构建失败: {e}", stage=LogStage.ERROR)
            raise
        except OSError as e:
            error(f"构建失败: {e}", stage=LogStage.ERROR)
            raise IOFailureError("文件系统操作失败", e) from e
        finally:
            context.build_stats['end_time'] = time.time()

        build_time = context.build_stats['end_time'] - context.build_stats['start_time']
        success(f"CBA 构建成功: {context.output_path}", stage=LogStage.DONE)
        info(f"构建时间: {build_time:.2f}秒", stage=LogStage.DONE)
        return context

    def validate_pipeline(self) -> List[str]:
        """验证构建管道的完整性

        Returns:
            List[str]: 验证错误列表，空列表表示验证通过
        """
        errors = []

        if not self._steps:
            errors.append("构建管道中没有步骤")
            return errors

        prev_end = 0
        for step in self._steps:
            start, end = step.get_progress_range()
            if start != prev_end:
                errors.append(f"步骤 '{step.name}' 的进度范围不连续: 期望起始 {prev_end}%, 实际 {start}%")
            if start >= end:
                errors.append(f"步骤 '{step.name}' 的进度范围无效: {start}% - {end}%")
            prev_end = end

        if prev_end != 100:
            errors.append(f"构建管道的总进度范围不是100%: {prev_end}%")

        return errors
