"""
测试公共夹具

提供最小的项目目录：COMPOSITEBUNDLE.MF、pom.xml 以及本地构件仓库。
"""

from pathlib import Path

import pytest

from cbapack.config.schema import ArchiveRequest, DependencyDescriptor, ProjectModel

MANIFEST_TEXT = (
    "CompositeBundle-ManifestVersion: 1\n"
    "Bundle-SymbolicName: com.example.proj\n"
    "Bundle-Version: 1.0.0\n"
)


@pytest.fixture
def project_dir(tmp_path):
    """带清单与 pom.xml 的项目目录"""
    meta_inf = tmp_path / "META-INF"
    meta_inf.mkdir()
    (meta_inf / "COMPOSITEBUNDLE.MF").write_text(MANIFEST_TEXT)
    (tmp_path / "pom.xml").write_text("<project><artifactId>proj</artifactId></project>\n")
    (tmp_path / "repo").mkdir()
    return tmp_path


@pytest.fixture
def make_artifact(project_dir):
    """在本地仓库中创建构件文件"""
    def _make(name: str, content: bytes = None) -> Path:
        path = project_dir / "repo" / name
        path.write_bytes(content if content is not None else f"content of {name}".encode())
        return path
    return _make


@pytest.fixture
def make_request(project_dir):
    """创建构建请求，可按需覆盖字段"""
    def _make(**overrides) -> ArchiveRequest:
        project = overrides.pop("project", None) or ProjectModel(
            group_id="com.example",
            artifact_id="proj",
            version="1.0",
            pom_file=project_dir / "pom.xml",
        )
        values = {
            "output_directory": project_dir / "target",
            "final_name": "proj-1.0",
            "manifest_file": project_dir / "META-INF" / "COMPOSITEBUNDLE.MF",
            "project": project,
        }
        values.update(overrides)
        return ArchiveRequest(**values)
    return _make


@pytest.fixture
def dependency():
    """创建依赖描述"""
    def _make(artifact_id: str, version: str, file=None, **kwargs) -> DependencyDescriptor:
        kwargs.setdefault("group_id", "org.example")
        return DependencyDescriptor(artifact_id=artifact_id, version=version, file=file, **kwargs)
    return _make
