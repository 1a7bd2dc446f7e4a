"""构建服务模块

提供 CBA 归档构建的核心功能。
"""

from .builder import ArchiveBuilder, ArchiveOutput, build_archive
from .build_context import (
    BuildContext,
    BuildError,
    NoDependenciesError,
    UnresolvedArtifactError,
    MissingManifestError,
    IOFailureError,
)
from .build_pipeline import BuildPipeline
from .archiver import (
    ArchiveEntry,
    ArchiveError,
    ZipArchiver,
    read_entries,
    extract_to_directory,
)
from .pom_properties import create_pom_properties, render_pom_properties

__all__ = [
    # 主构建器
    "ArchiveBuilder",
    "ArchiveOutput",
    "build_archive",
    "BuildPipeline",
    "BuildContext",

    # 错误
    "BuildError",
    "NoDependenciesError",
    "UnresolvedArtifactError",
    "MissingManifestError",
    "IOFailureError",

    # 归档
    "ArchiveEntry",
    "ArchiveError",
    "ZipArchiver",
    "read_entries",
    "extract_to_directory",

    # Maven 元数据
    "create_pom_properties",
    "render_pom_properties",
]
