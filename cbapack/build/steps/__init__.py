"""构建步骤"""

from .build_step import BuildStep
from .dependency_staging_step import DependencyStagingStep
from .manifest_step import ManifestStep
from .maven_metadata_step import MavenMetadataStep
from .archive_assembly_step import ArchiveAssemblyStep

__all__ = [
    "BuildStep",
    "DependencyStagingStep",
    "ManifestStep",
    "MavenMetadataStep",
    "ArchiveAssemblyStep",
]
