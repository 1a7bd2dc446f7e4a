"""
Maven 元数据步骤模块

登记项目 pom.xml 并生成 pom.properties。
"""

from ...utils.logging import info, debug, LogStage
from cbapack.build.build_context import BuildContext, IOFailureError
from cbapack.build.pom_properties import create_pom_properties
from .build_step import BuildStep


class MavenMetadataStep(BuildStep):
    """Maven 元数据步骤"""

    def __init__(self):
        super().__init__("metadata", "生成 Maven 元数据")

    def get_progress_range(self) -> tuple[int, int]:
        return (55, 70)

    def execute(self, context: BuildContext) -> None:
        project = context.request.project
        version = project.effective_version()
        if project.snapshot:
            debug(f"快照版本: {version}", stage=LogStage.METADATA)

        if not project.pom_file.is_file():
            raise IOFailureError(
                "项目描述文件不存在",
                FileNotFoundError(str(project.pom_file)),
            )

        maven_dir = project.maven_directory
        context.entries[f"{maven_dir}/pom.xml"] = project.pom_file

        properties_file = context.request.pom_properties_path
        try:
            create_pom_properties(
                project.group_id,
                project.artifact_id,
                version,
                properties_file,
                force_creation=True,
            )
        except OSError as e:
            raise IOFailureError("生成 pom.properties 失败", e) from e

        context.entries[f"{maven_dir}/pom.properties"] = properties_file

        info(f"Maven 元数据: {project.group_id}:{project.artifact_id}:{version}", stage=LogStage.METADATA)
        context.report("生成元数据", self.get_progress_range()[1], maven_dir)
