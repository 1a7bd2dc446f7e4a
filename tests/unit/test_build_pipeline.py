"""
构建管道单元测试

测试 CBA 构建的完整流程、校验顺序、错误类型与归档内容。
"""

import zipfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cbapack.build import (
    ArchiveBuilder,
    ArchiveOutput,
    BuildPipeline,
    IOFailureError,
    MissingManifestError,
    NoDependenciesError,
    UnresolvedArtifactError,
    build_archive,
)
from cbapack.build.archiver import ArchiveError
from cbapack.build.build_context import BuildContext, BuildError
from cbapack.build.steps.archive_assembly_step import ArchiveAssemblyStep
from cbapack.build.steps.build_step import BuildStep
from cbapack.config.schema import ProjectModel


def archive_names(path: Path) -> set:
    with zipfile.ZipFile(path) as zf:
        return set(zf.namelist())


class MockBuildStep(BuildStep):
    """模拟构建步骤"""

    def __init__(self, name="mock", progress_range=(100, 110)):
        super().__init__(name, "Mock step")
        self._progress_range = progress_range
        self.execute_called = False

    def get_progress_range(self):
        return self._progress_range

    def execute(self, context):
        self.execute_called = True


class TestBuildPipeline:
    """BuildPipeline 测试"""

    def test_default_steps(self):
        """默认步骤顺序"""
        pipeline = BuildPipeline()
        names = [step.name for step in pipeline.get_steps()]
        assert names == ["stage", "manifest", "metadata", "assemble"]

    def test_validate_pipeline_valid(self):
        """默认管道进度范围连续"""
        assert BuildPipeline().validate_pipeline() == []

    def test_validate_pipeline_empty(self):
        """空管道"""
        pipeline = BuildPipeline()
        for step in pipeline.get_steps():
            pipeline.remove_step(step.name)

        assert pipeline.validate_pipeline() == ["构建管道中没有步骤"]

    def test_validate_pipeline_gap(self):
        """追加的步骤超出 100%"""
        pipeline = BuildPipeline()
        pipeline.add_step(MockBuildStep())
        errors = pipeline.validate_pipeline()
        assert any("110" in e for e in errors)

    def test_add_step_with_position(self):
        """在指定位置添加步骤"""
        pipeline = BuildPipeline()
        step = MockBuildStep()
        pipeline.add_step(step, position=0)
        assert pipeline.get_steps()[0] is step

    def test_get_steps_returns_copy(self):
        pipeline = BuildPipeline()
        assert pipeline.get_steps() is not pipeline.get_steps()

    def test_custom_step_executes(self, make_request, make_artifact, dependency):
        """自定义步骤在默认步骤之后执行"""
        pipeline = BuildPipeline()
        step = MockBuildStep()
        pipeline.add_step(step)

        ArchiveBuilder(pipeline).build(
            make_request(), [dependency("libA", "1.0", make_artifact("libA.jar"))]
        )
        assert step.execute_called


class TestArchiveBuilder:
    """ArchiveBuilder.build 测试"""

    def test_scenario_mixed_scopes(self, make_request, make_artifact, dependency):
        """compile 与缺省范围打入归档，test 范围被跳过"""
        descriptors = [
            dependency("libA", "1.0", make_artifact("libA.jar"), type="jar", scope="compile"),
            dependency("libB", "2.0", make_artifact("libB.jar"), type="jar", scope="test"),
            dependency("libC", "3.1", make_artifact("libC.war"), type="war"),
        ]
        request = make_request()

        result = ArchiveBuilder().build(request, descriptors)

        assert isinstance(result, ArchiveOutput)
        assert result.produced_file_path == request.output_directory / "proj-1.0.cba"
        assert result.produced_file_path.is_file()
        assert archive_names(result.produced_file_path) == {
            "libA-1.0.jar",
            "libC-3.1.war",
            "META-INF/COMPOSITEBUNDLE.MF",
            "META-INF/maven/com.example/proj/pom.xml",
            "META-INF/maven/com.example/proj/pom.properties",
        }
        assert set(result.entries) == archive_names(result.produced_file_path)
        assert result.size == result.produced_file_path.stat().st_size

    def test_only_one_cba_produced(self, make_request, make_artifact, dependency):
        request = make_request()
        build_archive(request, [dependency("libA", "1.0", make_artifact("libA.jar"))])

        cba_files = list(request.output_directory.glob("*.cba"))
        assert cba_files == [request.archive_path]

    def test_entries_are_deflated(self, make_request, make_artifact, dependency):
        request = make_request()
        build_archive(request, [dependency("libA", "1.0", make_artifact("libA.jar", b"x" * 4096))])

        with zipfile.ZipFile(request.archive_path) as zf:
            assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in zf.infolist())

    def test_empty_dependencies(self, make_request):
        """空依赖列表"""
        request = make_request()

        with pytest.raises(NoDependenciesError):
            ArchiveBuilder().build(request, [])

        assert not request.archive_path.exists()

    def test_all_test_scope_treated_as_empty(self, make_request, make_artifact, dependency):
        """全部为 test 范围时等同于空依赖"""
        request = make_request()
        descriptors = [
            dependency("libB", "2.0", make_artifact("libB.jar"), scope="test"),
            dependency("libD", "1.0", make_artifact("libD.jar"), scope="provided"),
        ]

        with pytest.raises(NoDependenciesError):
            ArchiveBuilder().build(request, descriptors)

        assert not request.archive_path.exists()

    def test_unresolved_artifact(self, make_request, make_artifact, dependency):
        """compile 依赖缺少本地文件"""
        request = make_request()
        descriptors = [
            dependency("libA", "1.0", make_artifact("libA.jar")),
            dependency("libX", "0.9", None, type="bundle", scope="compile"),
        ]

        with pytest.raises(UnresolvedArtifactError) as exc_info:
            ArchiveBuilder().build(request, descriptors)

        assert exc_info.value.coordinate == "org.example:libX:0.9:bundle"
        assert "org.example:libX:0.9:bundle" in str(exc_info.value)
        assert not request.archive_path.exists()

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_artifact_path_is_unresolved(self, make_request, dependency, blank):
        """空白构件路径等同未解析"""
        request = make_request()

        with pytest.raises(UnresolvedArtifactError) as exc_info:
            ArchiveBuilder().build(request, [dependency("libA", "1.0", blank)])

        assert exc_info.value.coordinate == "org.example:libA:1.0:jar"
        assert not request.archive_path.exists()

    def test_unresolved_test_scope_is_ignored(self, make_request, make_artifact, dependency):
        """非 compile 依赖不要求已解析"""
        request = make_request()
        descriptors = [
            dependency("libA", "1.0", make_artifact("libA.jar")),
            dependency("junit", "4.13", None, scope="test"),
        ]

        result = ArchiveBuilder().build(request, descriptors)
        assert "junit-4.13.jar" not in archive_names(result.produced_file_path)

    def test_missing_manifest(self, make_request, make_artifact, dependency, project_dir):
        """清单文件不存在"""
        request = make_request(manifest_file=project_dir / "missing" / "COMPOSITEBUNDLE.MF")

        with pytest.raises(MissingManifestError) as exc_info:
            ArchiveBuilder().build(request, [dependency("libA", "1.0", make_artifact("libA.jar"))])

        assert exc_info.value.path == request.manifest_file
        assert not request.archive_path.exists()

    def test_missing_pom_file(self, make_request, make_artifact, dependency, project_dir):
        """项目描述文件不存在"""
        project = ProjectModel(
            group_id="com.example",
            artifact_id="proj",
            version="1.0",
            pom_file=project_dir / "nope.xml",
        )
        request = make_request(project=project)

        with pytest.raises(IOFailureError) as exc_info:
            ArchiveBuilder().build(request, [dependency("libA", "1.0", make_artifact("libA.jar"))])

        assert isinstance(exc_info.value.cause, FileNotFoundError)
        assert not request.archive_path.exists()

    def test_artifact_file_missing_on_disk(self, make_request, dependency, project_dir):
        """构件路径已设置但文件不存在"""
        request = make_request()
        descriptor = dependency("libA", "1.0", project_dir / "repo" / "gone.jar")

        with pytest.raises(IOFailureError) as exc_info:
            ArchiveBuilder().build(request, [descriptor])

        assert isinstance(exc_info.value.cause, OSError)
        assert isinstance(exc_info.value, BuildError)
        assert not request.archive_path.exists()
        assert list(request.output_directory.glob("*.tmp")) == []

    def test_artifact_path_is_directory(self, make_request, make_artifact, dependency, project_dir):
        """构件路径指向目录时不写出归档"""
        request = make_request()
        not_a_file = project_dir / "repo" / "notafile"
        not_a_file.mkdir()
        descriptors = [
            dependency("libA", "1.0", not_a_file),
            dependency("libB", "2.0", make_artifact("libB.jar")),
        ]

        with pytest.raises(IOFailureError) as exc_info:
            ArchiveBuilder().build(request, descriptors)

        assert isinstance(exc_info.value.cause, IsADirectoryError)
        assert not request.archive_path.exists()
        assert list(request.output_directory.glob("*.tmp")) == []

    def test_rebuild_overwrites_stale_archive(self, make_request, make_artifact, dependency):
        """重复构建覆盖旧归档，条目集合一致"""
        request = make_request()
        request.output_directory.mkdir(parents=True)
        request.archive_path.write_bytes(b"stale, not a zip")

        descriptors = [
            dependency("libC", "3.1", make_artifact("libC.war"), type="war"),
            dependency("libA", "1.0", make_artifact("libA.jar")),
        ]

        first = archive_names(ArchiveBuilder().build(request, descriptors).produced_file_path)
        second = archive_names(ArchiveBuilder().build(request, list(reversed(descriptors))).produced_file_path)

        assert first == second
        assert "libA-1.0.jar" in first

    def test_dependency_round_trip(self, make_request, make_artifact, dependency):
        """归档中的依赖条目与源文件逐字节一致"""
        payload_a = bytes(range(256)) * 64
        payload_c = b"PK\x03\x04 nested archive bytes"
        descriptors = [
            dependency("libA", "1.0", make_artifact("libA.jar", payload_a)),
            dependency("libC", "3.1", make_artifact("libC.war", payload_c), type="war"),
        ]
        request = make_request()

        ArchiveBuilder().build(request, descriptors)

        with zipfile.ZipFile(request.archive_path) as zf:
            assert zf.read("libA-1.0.jar") == payload_a
            assert zf.read("libC-3.1.war") == payload_c

    def test_manifest_and_metadata_contents(self, make_request, make_artifact, dependency, project_dir):
        request = make_request()
        ArchiveBuilder().build(request, [dependency("libA", "1.0", make_artifact("libA.jar"))])

        with zipfile.ZipFile(request.archive_path) as zf:
            manifest = zf.read("META-INF/COMPOSITEBUNDLE.MF")
            pom = zf.read("META-INF/maven/com.example/proj/pom.xml")
            properties = zf.read("META-INF/maven/com.example/proj/pom.properties").decode("iso-8859-1")

        assert manifest == (project_dir / "META-INF" / "COMPOSITEBUNDLE.MF").read_bytes()
        assert pom == (project_dir / "pom.xml").read_bytes()
        assert "groupId=com.example" in properties
        assert "artifactId=proj" in properties
        assert "version=1.0" in properties

    def test_work_directory_left_in_place(self, make_request, make_artifact, dependency):
        """构建后保留暂存目录"""
        request = make_request()
        ArchiveBuilder().build(request, [dependency("libA", "1.0", make_artifact("libA.jar"))])

        assert (request.work_directory / "META-INF" / "COMPOSITEBUNDLE.MF").is_file()
        assert request.pom_properties_path.is_file()

    def test_work_directory_contents_are_archived(self, make_request, make_artifact, dependency):
        """暂存目录中已有的文件按相对路径进入归档"""
        request = make_request()
        extra = request.work_directory / "OSGI-INF" / "blueprint.xml"
        extra.parent.mkdir(parents=True)
        extra.write_text("<blueprint/>")

        ArchiveBuilder().build(request, [dependency("libA", "1.0", make_artifact("libA.jar"))])

        assert "OSGI-INF/blueprint.xml" in archive_names(request.archive_path)

    def test_duplicate_entry_last_sorted_wins(self, make_request, make_artifact, dependency):
        """同名条目按坐标排序后最后一个生效，与输入顺序无关"""
        first = dependency("dup", "1.0", make_artifact("a-dup.jar", b"from group a"), group_id="a.group")
        second = dependency("dup", "1.0", make_artifact("b-dup.jar", b"from group b"), group_id="b.group")
        request = make_request()

        for descriptors in ([first, second], [second, first]):
            ArchiveBuilder().build(request, descriptors)
            with zipfile.ZipFile(request.archive_path) as zf:
                assert zf.namelist().count("dup-1.0.jar") == 1
                assert zf.read("dup-1.0.jar") == b"from group b"

    def test_snapshot_version_kept(self, make_request, make_artifact, dependency, project_dir):
        """快照版本原样写入 pom.properties"""
        project = ProjectModel(
            group_id="com.example",
            artifact_id="proj",
            version="1.1-SNAPSHOT",
            pom_file=project_dir / "pom.xml",
        )
        request = make_request(project=project, final_name="proj-1.1-SNAPSHOT")

        ArchiveBuilder().build(request, [dependency("libA", "1.0", make_artifact("libA.jar"))])

        with zipfile.ZipFile(request.archive_path) as zf:
            properties = zf.read("META-INF/maven/com.example/proj/pom.properties").decode()
        assert "version=1.1-SNAPSHOT" in properties

    def test_progress_callback(self, make_request, make_artifact, dependency):
        """进度回调最终到达 100%"""
        callback = MagicMock()
        ArchiveBuilder().build(
            make_request(), [dependency("libA", "1.0", make_artifact("libA.jar"))], callback
        )

        assert callback.called
        percents = [call.args[1] for call in callback.call_args_list]
        assert percents == sorted(percents)
        assert percents[-1] == 100


class TestBuildContext:
    """BuildContext 测试"""

    def test_init(self, make_request):
        request = make_request()
        context = BuildContext(request, [])

        assert context.entries == {}
        assert context.output_path is None
        assert 'start_time' in context.build_stats
        assert 'archive_size' in context.build_stats

    def test_report_without_callback(self, make_request):
        BuildContext(make_request(), []).report("stage", 10, "noop")

    def test_unsafe_entry_maps_to_io_failure(self, make_request, make_artifact):
        """组装阶段的非法条目路径归为 IOFailureError"""
        request = make_request()
        context = BuildContext(request, [])
        context.entries["../evil-1.0.jar"] = make_artifact("evil.jar")

        with pytest.raises(IOFailureError) as exc_info:
            ArchiveAssemblyStep().execute(context)

        assert isinstance(exc_info.value.cause, ArchiveError)
        assert not request.archive_path.exists()
