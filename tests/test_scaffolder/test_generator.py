"""Tests for the project generation orchestrator.

Covers:
- plan() is pure and ordered
- generate() writes every planned file and returns the manifest
- Verbose console output
- Error propagation from the resolver and the render engine
- initializr-style request dicts
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from initforge.config import GeneratorConfig
from initforge.models import BuildSystemSpec, DependencyScope, Packaging
from initforge.scaffolder.generator import ProjectGenerator, descriptor_from_request
from initforge.scaffolder.render import TemplateRenderError
from initforge.scaffolder.resolver import UnsupportedCombination
from initforge.utils import console


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# plan()
# ---------------------------------------------------------------------------


class TestPlan:
    def test_plan_does_not_touch_disk(self, maven_descriptor, tmp_path: Path):
        files = ProjectGenerator().plan(maven_descriptor)
        assert files[0].path == "pom.xml"
        assert len(files) == 9
        assert list(tmp_path.iterdir()) == []

    def test_war_plan(self, make_descriptor):
        files = ProjectGenerator().plan(make_descriptor(packaging=Packaging.WAR))
        paths = [f.path for f in files]
        assert "src/main/java/com/example/myapp/ServletInitializer.java" in paths

    def test_unsupported_combination(self, make_descriptor):
        descriptor = make_descriptor(build_system=BuildSystemSpec(id="gradle"))
        with pytest.raises(UnsupportedCombination):
            ProjectGenerator().plan(descriptor)

    def test_uses_config(self, maven_descriptor):
        files = ProjectGenerator(GeneratorConfig(test_class_suffix="IT")).plan(maven_descriptor)
        assert "src/test/java/com/example/myapp/MyAppApplicationIT.java" in [f.path for f in files]


# ---------------------------------------------------------------------------
# generate()
# ---------------------------------------------------------------------------


class TestGenerate:
    async def test_writes_planned_files(self, maven_descriptor, tmp_project_dir):
        generator = ProjectGenerator()
        manifest = await generator.generate(maven_descriptor, tmp_project_dir)

        planned = generator.plan(maven_descriptor)
        assert manifest.paths == [f.path for f in planned]
        for rendered in planned:
            assert (tmp_project_dir / rendered.path).read_bytes() == rendered.content
        assert manifest.executables == ["mvnw"]

    async def test_render_error_writes_nothing(self, make_descriptor, tmp_project_dir):
        with pytest.raises(TemplateRenderError):
            await ProjectGenerator().generate(make_descriptor(package_name=None), tmp_project_dir)
        assert not tmp_project_dir.exists()

    async def test_unsupported_writes_nothing(self, make_descriptor, tmp_project_dir):
        descriptor = make_descriptor(build_system=BuildSystemSpec(id="maven", dialect="kotlin"))
        with pytest.raises(UnsupportedCombination):
            await ProjectGenerator().generate(descriptor, tmp_project_dir)
        assert not tmp_project_dir.exists()

    async def test_verbose_output(self, maven_descriptor, tmp_project_dir):
        with console.capture() as capture:
            await ProjectGenerator(verbose=True).generate(maven_descriptor, tmp_project_dir)
        output = capture.get()
        assert "Generating" in output
        assert "pom.xml" in output
        assert "Project generated" in output

    async def test_verbose_failure_is_reported_and_raised(self, make_descriptor, tmp_project_dir):
        with console.capture() as capture:
            with pytest.raises(TemplateRenderError):
                await ProjectGenerator(verbose=True).generate(
                    make_descriptor(application_name=None), tmp_project_dir
                )
        assert "failed" in capture.get()

    async def test_quiet_by_default(self, maven_descriptor, tmp_project_dir):
        with console.capture() as capture:
            await ProjectGenerator().generate(maven_descriptor, tmp_project_dir)
        assert capture.get() == ""


# ---------------------------------------------------------------------------
# Request dicts
# ---------------------------------------------------------------------------


class TestDescriptorFromRequest:
    def test_full_request(self):
        descriptor = descriptor_from_request({
            "type": "gradle-project-kotlin",
            "bootVersion": "3.3.8",
            "language": "kotlin",
            "javaVersion": "21",
            "packaging": "war",
            "groupId": "com.example",
            "artifactId": "my-app",
            "name": "My App",
            "description": "Demo",
            "packageName": "com.example.myapp",
            "applicationName": "MyAppApplication",
            "dependencies": [
                "org.springframework.boot:spring-boot-starter-web",
                {"group_id": "org.postgresql", "artifact_id": "postgresql", "scope": "runtime"},
            ],
        })
        assert descriptor.build_system == BuildSystemSpec(id="gradle", dialect="kotlin")
        assert descriptor.language.id == "kotlin"
        assert descriptor.language.version == "21"
        assert descriptor.packaging is Packaging.WAR
        assert descriptor.project_name == "My App"
        assert descriptor.dependencies[0].artifact_id == "spring-boot-starter-web"
        assert descriptor.dependencies[1].scope is DependencyScope.RUNTIME

    def test_defaults(self):
        descriptor = descriptor_from_request({
            "bootVersion": "3.4.3",
            "groupId": "com.example",
            "artifactId": "demo",
        })
        assert descriptor.build_system == BuildSystemSpec.for_id("maven")
        assert descriptor.language.id == "java"
        assert descriptor.language.version == "17"
        assert descriptor.version == "0.0.1-SNAPSHOT"

    def test_gradle_project_defaults_to_groovy_dsl(self):
        descriptor = descriptor_from_request({
            "type": "gradle-project",
            "bootVersion": "3.4.3",
            "groupId": "com.example",
            "artifactId": "demo",
        })
        assert descriptor.build_system.dialect == "groovy"

    def test_versioned_dependency(self):
        descriptor = descriptor_from_request({
            "bootVersion": "3.4.3",
            "groupId": "com.example",
            "artifactId": "demo",
            "dependencies": ["com.acme:lib:1.2.3"],
        })
        assert descriptor.dependencies[0].version == "1.2.3"

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown project type"):
            descriptor_from_request({"type": "ant-project"})

    def test_malformed_dependency(self):
        with pytest.raises(ValueError, match="group:artifact"):
            descriptor_from_request({
                "bootVersion": "3.4.3",
                "groupId": "com.example",
                "artifactId": "demo",
                "dependencies": ["just-a-name"],
            })

    def test_missing_boot_version(self):
        with pytest.raises(ValidationError):
            descriptor_from_request({"groupId": "com.example", "artifactId": "demo"})

    async def test_generate_from_request(self, tmp_project_dir):
        manifest = await ProjectGenerator().generate_from_request(
            {
                "type": "gradle-project",
                "bootVersion": "3.4.3",
                "groupId": "com.example",
                "artifactId": "demo",
                "packageName": "com.example.demo",
                "applicationName": "DemoApplication",
            },
            tmp_project_dir,
        )
        assert "build.gradle" in manifest.paths
        assert (tmp_project_dir / "src/main/java/com/example/demo/DemoApplication.java").is_file()
