"""
构建上下文模块

定义构建过程中的共享数据结构和异常类。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..config.schema import ArchiveRequest, DependencyDescriptor

# 进度回调类型: (阶段, 当前, 总数, 消息)
ProgressCallback = Callable[[str, int, int, str], None]


@dataclass
class BuildContext:
    """构建上下文，包含构建过程中的共享数据"""
    request: ArchiveRequest
    descriptors: List[DependencyDescriptor]
    progress_callback: Optional[ProgressCallback] = None

    # 构建过程中生成的数据
    included: List[DependencyDescriptor] = field(default_factory=list)
    # 归档条目路径 -> 源文件，按暂存顺序
    entries: Dict[str, Path] = field(default_factory=dict)
    manifest_path: Optional[Path] = None
    output_path: Optional[Path] = None

    build_stats: Dict[str, Any] = field(default_factory=lambda: {
        'start_time': 0,
        'end_time': 0,
        'total_dependencies': 0,
        'included_dependencies': 0,
        'total_entries': 0,
        'archive_size': 0,
    })

    def report(self, stage: str, current: int, message: str = "") -> None:
        if self.progress_callback:
            self.progress_callback(stage, current, 100, message)


class BuildError(Exception):
    """构建错误"""
    pass


class NoDependenciesError(BuildError):
    """没有可打包的依赖"""
    pass


class UnresolvedArtifactError(BuildError):
    """依赖构件未解析到本地文件"""

    def __init__(self, coordinate: str):
        super().__init__(f"{coordinate} could not be resolved")
        self.coordinate = coordinate


class MissingManifestError(BuildError):
    """COMPOSITEBUNDLE.MF 不存在"""

    def __init__(self, path: Path):
        super().__init__(f"CompositeBundle manifest file not available: {path}")
        self.path = path


class IOFailureError(BuildError):
    """文件系统操作失败"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{message}: {cause}" if cause else message)
        self.cause = cause
