"""
清单复制步骤模块

将 COMPOSITEBUNDLE.MF 复制到暂存目录的 META-INF 下。
"""

import shutil

from ...config.schema import MANIFEST_ENTRY
from ...utils import ensure_directory
from ...utils.logging import info, debug, LogStage
from cbapack.build.build_context import BuildContext, IOFailureError, MissingManifestError
from .build_step import BuildStep


class ManifestStep(BuildStep):
    """清单复制步骤"""

    def __init__(self):
        super().__init__("manifest", "复制 COMPOSITEBUNDLE.MF")

    def get_progress_range(self) -> tuple[int, int]:
        return (40, 55)

    def execute(self, context: BuildContext) -> None:
        manifest_file = context.request.manifest_file
        if not manifest_file.is_file():
            raise MissingManifestError(manifest_file)

        info(f"Using COMPOSITEBUNDLE.MF from: {manifest_file}", stage=LogStage.MANIFEST)

        target = context.request.work_directory / MANIFEST_ENTRY
        try:
            ensure_directory(target.parent)
            shutil.copyfile(manifest_file, target)
        except OSError as e:
            raise IOFailureError("复制 COMPOSITEBUNDLE.MF 失败", e) from e

        context.manifest_path = target
        debug(f"清单已复制到: {target}", stage=LogStage.MANIFEST)
        context.report("复制清单", self.get_progress_range()[1], MANIFEST_ENTRY)
