"""Main scaffolding orchestrator.

Takes a ``ProjectDescriptor`` (or a raw initializr-style request dict) and
generates a complete JVM project directory: build file, wrapper, sources,
resources and VCS metadata.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from initforge.config import GeneratorConfig
from initforge.models import (
    DIALECT_KOTLIN,
    GRADLE,
    MAVEN,
    BuildSystemSpec,
    Dependency,
    Language,
    Manifest,
    ProjectDescriptor,
    RenderedFile,
)
from initforge.utils import (
    console,
    print_error,
    print_manifest,
    print_success,
    print_summary_table,
    print_warning,
)

from .materializer import ProjectMaterializer
from .render import RenderEngine
from .resolver import TemplateResolver
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Request type ids
# ---------------------------------------------------------------------------

PROJECT_TYPES: dict[str, BuildSystemSpec] = {
    "maven-project": BuildSystemSpec.for_id(MAVEN),
    "gradle-project": BuildSystemSpec.for_id(GRADLE),
    "gradle-project-kotlin": BuildSystemSpec.for_id_and_dialect(GRADLE, DIALECT_KOTLIN),
}


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Main scaffolding orchestrator.

    Given a ``ProjectDescriptor``, produces a directory tree containing:
    - Maven ``pom.xml`` or Gradle ``build.gradle``/``build.gradle.kts``
    - the matching wrapper properties and launcher scripts
    - main application and test classes, plus ``ServletInitializer`` for war
    - ``application.properties``, ``.gitignore`` and ``.gitattributes``

    The generator holds only read-only collaborators, so a single instance
    may serve several concurrent ``generate`` calls as long as each one
    targets its own directory.
    """

    def __init__(
        self, config: GeneratorConfig | None = None, *, verbose: bool = False
    ) -> None:
        self.config = config or GeneratorConfig()
        self.verbose = verbose
        self.resolver = TemplateResolver()
        self.renderer = TemplateRenderer()
        self.engine = RenderEngine(self.config, self.renderer)
        self.materializer = ProjectMaterializer()

    # -- Public API --------------------------------------------------------

    def plan(self, descriptor: ProjectDescriptor) -> list[RenderedFile]:
        """Resolve and render every file for *descriptor* without writing.

        Raises:
            UnsupportedCombination: If the build system / language pair has
                no template family.
            TemplateRenderError: If any template fails to render.
        """
        template_set = self.resolver.resolve(
            descriptor.build_system, descriptor.language, descriptor.packaging
        )
        return self.engine.render_all(descriptor, template_set)

    async def generate(
        self, descriptor: ProjectDescriptor, target_dir: str | Path
    ) -> Manifest:
        """Generate the complete project under *target_dir*.

        Args:
            descriptor: What to generate.
            target_dir: Project root.  Created if missing; existing files with
                identical content are left as they are.

        Returns:
            The ``Manifest`` of every file written.
        """
        target = Path(target_dir)
        if self.verbose:
            self._print_request(descriptor, target)

        try:
            files = self.plan(descriptor)
            manifest = await self.materializer.materialize(target, files)
        except Exception as exc:
            if self.verbose:
                print_error(f"Generation of {descriptor.project_name} failed: {exc}")
            raise

        if self.verbose:
            print_manifest(manifest)
            print_success(f"Project generated at {target}")
        return manifest

    async def generate_from_request(
        self, request: dict[str, Any], target_dir: str | Path
    ) -> Manifest:
        """Generate a project from an initializr-style request dict.

        Extracts ``ProjectDescriptor`` fields from the request payload and
        delegates to :meth:`generate`.
        """
        descriptor = descriptor_from_request(request)
        return await self.generate(descriptor, target_dir)

    # -- Console output ----------------------------------------------------

    def _print_request(self, descriptor: ProjectDescriptor, target: Path) -> None:
        console.print(f"  Generating [bold]{descriptor.project_name}[/bold]...")
        print_summary_table(
            {
                "Spring Boot": descriptor.platform_version,
                "Build system": str(descriptor.build_system),
                "Language": str(descriptor.language),
                "Packaging": descriptor.packaging.value,
                "Coordinates": f"{descriptor.group_id}:{descriptor.artifact_id}:{descriptor.version}",
                "Target": str(target),
            },
            title="Project",
        )
        if target.is_dir() and any(target.iterdir()):
            print_warning(f"{target} is not empty; existing files are kept")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def descriptor_from_request(request: dict[str, Any]) -> ProjectDescriptor:
    """Build a ``ProjectDescriptor`` from initializr-style request keys.

    Recognised keys: ``type`` (``maven-project``, ``gradle-project``,
    ``gradle-project-kotlin``), ``bootVersion``, ``language``,
    ``javaVersion``, ``packaging``, ``groupId``, ``artifactId``, ``version``,
    ``name``, ``description``, ``packageName``, ``applicationName`` and
    ``dependencies`` (a list of ``group:artifact[:version]`` strings or dicts).

    Raises:
        ValueError: If ``type`` is unknown.
        pydantic.ValidationError: If the resulting descriptor is invalid.
    """
    project_type = request.get("type", "maven-project")
    if project_type not in PROJECT_TYPES:
        raise ValueError(
            f"Unknown project type {project_type!r}; "
            f"expected one of {', '.join(sorted(PROJECT_TYPES))}"
        )

    fields: dict[str, Any] = {
        "platform_version": request.get("bootVersion"),
        "build_system": PROJECT_TYPES[project_type],
        "language": Language.for_id(
            request.get("language", "java"), request.get("javaVersion")
        ),
        "group_id": request.get("groupId"),
        "artifact_id": request.get("artifactId"),
    }
    optional = {
        "packaging": "packaging",
        "version": "version",
        "name": "name",
        "description": "description",
        "packageName": "package_name",
        "applicationName": "application_name",
    }
    for key, field in optional.items():
        if request.get(key) is not None:
            fields[field] = request[key]

    fields["dependencies"] = tuple(
        _parse_dependency(dep) for dep in request.get("dependencies", ())
    )
    return ProjectDescriptor.model_validate(fields)


def _parse_dependency(value: str | dict[str, Any]) -> Dependency:
    if isinstance(value, dict):
        return Dependency.model_validate(value)
    parts = value.split(":")
    if len(parts) not in (2, 3) or not all(parts):
        raise ValueError(f"Dependency must be 'group:artifact[:version]': {value!r}")
    return Dependency(
        group_id=parts[0],
        artifact_id=parts[1],
        version=parts[2] if len(parts) == 3 else None,
    )
