"""
cbapack - Composite Bundle Archive 构建工具

将项目的 compile 依赖、COMPOSITEBUNDLE.MF 与 Maven 坐标元数据打包为 .cba 归档。
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"

from .config.schema import ArchiveRequest, DependencyDescriptor, ProjectModel
from .build.builder import ArchiveBuilder, ArchiveOutput

__all__ = [
    "ArchiveBuilder",
    "ArchiveOutput",
    "ArchiveRequest",
    "DependencyDescriptor",
    "ProjectModel",
    "__version__",
]
