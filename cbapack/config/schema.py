"""
配置 Schema 定义

使用 Pydantic 定义 CBA 构建所需的依赖描述、项目信息与归档请求模型。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

COMPILE_SCOPE = "compile"
DEFAULT_ARTIFACT_TYPE = "jar"
SNAPSHOT_SUFFIX = "-SNAPSHOT"
MANIFEST_ENTRY = "META-INF/COMPOSITEBUNDLE.MF"
ARCHIVE_EXTENSION = ".cba"
POM_PROPERTIES_DIRECTORY = "maven-zip-plugin"


def _check_coordinate_part(value: str) -> str:
    """坐标会拼入归档条目路径，不允许出现路径分隔符或 . / .. 段"""
    if '/' in value or '\\' in value or value in ('.', '..'):
        raise ValueError(f"非法的坐标值: {value!r}")
    return value


def _check_final_name(value: str) -> str:
    value = value.strip()
    if not value or '/' in value or '\\' in value or value in ('.', '..'):
        raise ValueError("final_name 不能为空且不能包含路径分隔符")
    if value == POM_PROPERTIES_DIRECTORY:
        raise ValueError(f"final_name 不能为 {POM_PROPERTIES_DIRECTORY}（与 pom.properties 目录冲突）")
    return value


class DependencyDescriptor(BaseModel):
    """已解析的依赖描述"""
    group_id: str = Field(..., description="groupId", min_length=1)
    artifact_id: str = Field(..., description="artifactId", min_length=1)
    version: str = Field(..., description="版本号", min_length=1)
    type: str = Field(DEFAULT_ARTIFACT_TYPE, description="构件类型（扩展名）")
    scope: Optional[str] = Field(None, description="依赖范围，缺省等同 compile")
    file: Optional[Path] = Field(None, description="已下载构件的本地路径")

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "str_strip_whitespace": True,
    }

    @field_validator('type', mode='before')
    @classmethod
    def default_type(cls, v: Any) -> Any:
        """类型缺省为 jar"""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_ARTIFACT_TYPE
        return v

    @field_validator('scope', mode='before')
    @classmethod
    def normalize_scope(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('file', mode='before')
    @classmethod
    def normalize_file(cls, v: Any) -> Any:
        """空路径视为未解析"""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('group_id', 'artifact_id', 'version', 'type')
    @classmethod
    def validate_coordinate(cls, v: str) -> str:
        return _check_coordinate_part(v)

    @property
    def coordinate(self) -> str:
        """group:artifact:version:type"""
        return f"{self.group_id}:{self.artifact_id}:{self.version}:{self.type}"

    @property
    def is_includable(self) -> bool:
        """scope 缺省或为 compile 时才打入归档"""
        return self.scope is None or self.scope == COMPILE_SCOPE

    @property
    def entry_name(self) -> str:
        """归档根目录下的条目名"""
        return f"{self.artifact_id}-{self.version}.{self.type}"

    @property
    def sort_key(self) -> Tuple[str, str, str, str]:
        return (self.group_id, self.artifact_id, self.version, self.type)


class ProjectModel(BaseModel):
    """当前项目的 Maven 坐标信息"""
    group_id: str = Field(..., description="项目 groupId", min_length=1)
    artifact_id: str = Field(..., description="项目 artifactId", min_length=1)
    version: str = Field(..., description="项目版本", min_length=1)
    pom_file: Path = Field(..., description="项目描述文件 (pom.xml) 路径")
    snapshot: bool = Field(False, description="是否为快照版本，缺省按版本号推断")

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "str_strip_whitespace": True,
    }

    @model_validator(mode='before')
    @classmethod
    def infer_snapshot(cls, data: Any) -> Any:
        """未显式指定时，根据 -SNAPSHOT 后缀推断快照标记"""
        if isinstance(data, dict) and data.get('snapshot') is None:
            version = data.get('version')
            if isinstance(version, str):
                data = {**data, 'snapshot': version.strip().endswith(SNAPSHOT_SUFFIX)}
        return data

    @field_validator('group_id', 'artifact_id')
    @classmethod
    def validate_coordinate(cls, v: str) -> str:
        return _check_coordinate_part(v)

    def effective_version(self) -> str:
        """写入 pom.properties 的版本

        快照版本同样直接使用项目自身的构件版本，不做时间戳展开。
        """
        return self.version

    @property
    def maven_directory(self) -> str:
        """归档内 Maven 元数据目录"""
        return f"META-INF/maven/{self.group_id}/{self.artifact_id}"


class ArchiveRequest(BaseModel):
    """一次构建调用的参数，构建期间不可变"""
    output_directory: Path = Field(..., description="输出目录")
    final_name: str = Field(..., description="归档基础名", min_length=1)
    manifest_file: Path = Field(..., description="COMPOSITEBUNDLE.MF 文件路径")
    project: ProjectModel = Field(..., description="项目信息")
    compression_level: int = Field(6, description="deflate 压缩级别", ge=1, le=9)

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @field_validator('final_name')
    @classmethod
    def validate_final_name(cls, v: str) -> str:
        return _check_final_name(v)

    @property
    def work_directory(self) -> Path:
        """暂存目录 output_directory/final_name"""
        return self.output_directory / self.final_name

    @property
    def archive_path(self) -> Path:
        return self.output_directory / f"{self.final_name}{ARCHIVE_EXTENSION}"

    @property
    def pom_properties_path(self) -> Path:
        return self.output_directory / POM_PROPERTIES_DIRECTORY / "pom.properties"


class ArchiveModel(BaseModel):
    """配置文件中的 archive 段"""
    output_directory: Path = Field(..., description="输出目录")
    final_name: str = Field(..., description="归档基础名", min_length=1)
    basedir: Optional[Path] = Field(None, description="项目根目录，缺省为配置文件所在目录")
    manifest_file: Optional[Path] = Field(
        None,
        description="COMPOSITEBUNDLE.MF 路径，缺省为 <basedir>/META-INF/COMPOSITEBUNDLE.MF"
    )
    compression_level: int = Field(6, description="deflate 压缩级别", ge=1, le=9)

    @field_validator('final_name')
    @classmethod
    def validate_final_name(cls, v: str) -> str:
        return _check_final_name(v)

    def resolve_manifest_file(self) -> Path:
        """获取实际使用的清单文件路径"""
        if self.manifest_file is not None:
            return self.manifest_file
        return (self.basedir or Path('.')) / MANIFEST_ENTRY


class ConfigModel(BaseModel):
    """配置元信息模型"""
    version: int = Field(1, description="配置 schema 版本", ge=1)

    @field_validator('version')
    @classmethod
    def validate_config_version(cls, v: int) -> int:
        SUPPORTED_VERSIONS = [1]
        if v not in SUPPORTED_VERSIONS:
            raise ValueError(f"不支持的配置版本 {v}，支持的版本: {SUPPORTED_VERSIONS}")
        return v


class CbaConfig(BaseModel):
    """cbapack 主配置模型

    整个 YAML 配置文件的根模型。
    """

    config: ConfigModel = Field(default_factory=ConfigModel, description="配置元信息")
    archive: ArchiveModel = Field(..., description="归档配置")
    project: ProjectModel = Field(..., description="项目信息")
    dependencies: List[DependencyDescriptor] = Field(default_factory=list, description="已解析的依赖列表")

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
    }

    def to_request(self) -> ArchiveRequest:
        """转换为构建请求"""
        return ArchiveRequest(
            output_directory=self.archive.output_directory,
            final_name=self.archive.final_name,
            manifest_file=self.archive.resolve_manifest_file(),
            project=self.project,
            compression_level=self.archive.compression_level,
        )

    def descriptors(self) -> List[DependencyDescriptor]:
        return list(self.dependencies)

    def to_dict(self) -> Dict[str, Any]:
        """转换为可写入 YAML 的字典"""
        data = self.model_dump(exclude_none=True)

        def convert_values(obj):
            if isinstance(obj, dict):
                return {k: convert_values(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert_values(item) for item in obj]
            elif isinstance(obj, Path):
                return obj.as_posix()
            return obj

        return convert_values(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CbaConfig':
        """从字典创建配置实例"""
        return cls.model_validate(data)
