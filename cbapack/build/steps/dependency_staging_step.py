"""
依赖暂存步骤模块

筛选 compile 范围的依赖，按坐标排序后登记为归档根目录条目。
"""

from ...utils.logging import info, success, warning, debug, LogStage
from cbapack.build.build_context import (
    BuildContext,
    NoDependenciesError,
    UnresolvedArtifactError,
)
from .build_step import BuildStep


class DependencyStagingStep(BuildStep):
    """依赖暂存步骤"""

    def __init__(self):
        super().__init__("stage", "暂存依赖构件")

    def get_progress_range(self) -> tuple[int, int]:
        return (0, 40)

    def execute(self, context: BuildContext) -> None:
        if not context.descriptors:
            raise NoDependenciesError("There are no dependency artifacts to create the cba")

        context.build_stats['total_dependencies'] = len(context.descriptors)

        included = [d for d in context.descriptors if d.is_includable]
        skipped = len(context.descriptors) - len(included)
        if skipped:
            debug(f"跳过 {skipped} 个非 compile 范围的依赖", stage=LogStage.STAGE)

        if not included:
            raise NoDependenciesError("There are no compile scope dependency artifacts to create the cba")

        # 排序保证重复构建得到相同的条目集合
        included.sort(key=lambda d: d.sort_key)

        start, end = self.get_progress_range()
        for index, descriptor in enumerate(included):
            info(f"Dependency artifact [{descriptor.coordinate}]", stage=LogStage.STAGE)
            debug(f"File location: {descriptor.file}", stage=LogStage.STAGE)

            if descriptor.file is None:
                raise UnresolvedArtifactError(descriptor.coordinate)

            name = descriptor.entry_name
            if name in context.entries:
                warning(f"条目 {name} 重复，使用 {descriptor.coordinate} 覆盖", stage=LogStage.STAGE)
            context.entries[name] = descriptor.file

            context.report("暂存依赖", start + int((index + 1) / len(included) * (end - start)), name)

        context.included = included
        context.build_stats['included_dependencies'] = len(included)
        success(f"依赖暂存完成: {len(included)} 个构件", stage=LogStage.STAGE)
