"""Render engine: expands resolved templates against a project descriptor.

Builds the Jinja2 context for a ``ProjectDescriptor`` (platform coordinates,
wrapper distribution, language plugin versions, dependency list) and turns
each ``TemplateSpec`` into an in-memory ``RenderedFile``.  Nothing here
touches the filesystem beyond reading templates.
"""

from __future__ import annotations

from typing import Any, Optional

from jinja2 import TemplateError

from initforge.config import GeneratorConfig
from initforge.models import (
    Dependency,
    DependencyScope,
    Packaging,
    ProjectDescriptor,
    RenderedFile,
)
from initforge.utils import package_path

from .resolver import LANGUAGES, LanguageLayout, TemplateKind, TemplateSet, TemplateSpec
from .templates import TemplateRenderer
from .wrapper_gen import WrapperAsset, count_token, select_wrapper


class TemplateRenderError(Exception):
    """Raised when a template cannot be rendered for a descriptor."""

    def __init__(self, message: str, template: str = "") -> None:
        self.template = template
        super().__init__(message)


_SOURCE_KINDS = frozenset({
    TemplateKind.MAIN_SOURCE,
    TemplateKind.TEST_SOURCE,
    TemplateKind.SERVLET_INITIALIZER,
})

_SCOPE_ORDER: dict[DependencyScope, int] = {
    DependencyScope.COMPILE: 0,
    DependencyScope.COMPILE_ONLY: 1,
    DependencyScope.RUNTIME: 2,
    DependencyScope.PROVIDED: 3,
    DependencyScope.TEST: 4,
}

_MAVEN_SCOPES: dict[DependencyScope, Optional[str]] = {
    DependencyScope.COMPILE: None,
    DependencyScope.COMPILE_ONLY: None,
    DependencyScope.RUNTIME: "runtime",
    DependencyScope.PROVIDED: "provided",
    DependencyScope.TEST: "test",
}


class RenderEngine:
    """Turns ``TemplateSpec`` entries into ``RenderedFile`` artifacts.

    The engine holds only immutable collaborators (config and a configured
    Jinja2 environment), so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    def render(self, spec: TemplateSpec, descriptor: ProjectDescriptor) -> RenderedFile:
        """Render one template for *descriptor*.

        Raises:
            TemplateRenderError: If a required descriptor field is missing, a
                placeholder cannot be resolved, or the wrapper token is not
                embedded exactly once.
        """
        context = self.build_context(descriptor)
        return self._render_spec(spec, context)

    def render_all(
        self, descriptor: ProjectDescriptor, template_set: TemplateSet
    ) -> list[RenderedFile]:
        """Render every template of *template_set*, in order."""
        context = self.build_context(descriptor)
        return [self._render_spec(spec, context) for spec in template_set]

    # -- Context building --------------------------------------------------

    def build_context(self, descriptor: ProjectDescriptor) -> dict[str, Any]:
        """Build the Jinja2 template context from the descriptor."""
        layout = _layout_for(descriptor)
        platform = descriptor.platform
        build_system_id = descriptor.build_system.id

        kotlin_version: Optional[str] = None
        if layout.id == "kotlin":
            kotlin_version = self.config.kotlin.resolve(platform)
            if kotlin_version is None:
                raise TemplateRenderError(
                    f"No Kotlin version configured for platform {descriptor.platform_version}"
                )

        application_name = descriptor.application_name
        test_class_name = (
            f"{application_name}{self.config.test_class_suffix}" if application_name else None
        )
        is_war = descriptor.packaging is Packaging.WAR

        return {
            "group_id": descriptor.group_id,
            "artifact_id": descriptor.artifact_id,
            "version": descriptor.version,
            "name": descriptor.project_name,
            "description": descriptor.description,
            "package_name": descriptor.package_name,
            "application_name": application_name,
            "test_class_name": test_class_name,
            "platform_version": descriptor.platform_version,
            "platform_group_id": self.config.platform_group_id,
            "platform_parent_artifact_id": self.config.platform_parent_artifact_id,
            "platform_plugin_id": self.config.platform_plugin_id,
            "dependency_management_version": self.config.dependency_management_plugin_version,
            "build_system": build_system_id,
            "dialect": descriptor.build_system.dialect,
            "language": layout.id,
            "java_version": descriptor.language.version,
            "kotlin_version": kotlin_version,
            "packaging": descriptor.packaging.value,
            "is_war": is_war,
            "dependencies": _dependency_context(descriptor, layout, is_war),
            "wrapper": select_wrapper(self.config, build_system_id, platform),
            "layout": layout,
        }

    # -- Rendering ---------------------------------------------------------

    def _render_spec(self, spec: TemplateSpec, context: dict[str, Any]) -> RenderedFile:
        if spec.kind in _SOURCE_KINDS:
            _require(context, spec, "package_name", "application_name")

        wrapper: Optional[WrapperAsset] = context["wrapper"]
        if spec.kind is TemplateKind.WRAPPER_PROPERTIES and wrapper is None:
            raise TemplateRenderError(
                f"No {context['build_system']} wrapper distribution configured for "
                f"platform {context['platform_version']}",
                template=spec.id,
            )

        try:
            text = self.renderer.render(spec.id, context)
        except TemplateError as exc:
            raise TemplateRenderError(
                f"Failed to render {spec.id}: {exc}", template=spec.id
            ) from exc

        if spec.kind is TemplateKind.WRAPPER_PROPERTIES:
            occurrences = count_token(text, wrapper)
            if occurrences != 1:
                raise TemplateRenderError(
                    f"{spec.id} must reference {wrapper.token} exactly once, "
                    f"found {occurrences}",
                    template=spec.id,
                )

        if spec.crlf:
            text = text.replace("\r\n", "\n").replace("\n", "\r\n")

        return RenderedFile(
            path=_output_path(spec, context),
            content=text.encode("utf-8"),
            executable=spec.executable,
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _layout_for(descriptor: ProjectDescriptor) -> LanguageLayout:
    layout = LANGUAGES.get(descriptor.language.id)
    if layout is None:
        raise TemplateRenderError(f"Unknown language: {descriptor.language.id}")
    return layout


def _require(context: dict[str, Any], spec: TemplateSpec, *fields: str) -> None:
    missing = [f for f in fields if not context.get(f)]
    if missing:
        raise TemplateRenderError(
            f"{spec.id} requires descriptor field(s): {', '.join(missing)}",
            template=spec.id,
        )


def _output_path(spec: TemplateSpec, context: dict[str, Any]) -> str:
    layout: LanguageLayout = context["layout"]
    values = {
        "main_root": layout.main_root,
        "test_root": layout.test_root,
        "package_path": package_path(context["package_name"] or ""),
        "application_name": context["application_name"] or "",
        "test_class_name": context["test_class_name"] or "",
    }
    try:
        return spec.output.format(**values)
    except (KeyError, IndexError) as exc:
        raise TemplateRenderError(
            f"Unresolved placeholder in output path {spec.output!r}: {exc}",
            template=spec.id,
        ) from exc


def _builtin_dependencies(layout: LanguageLayout, is_war: bool) -> list[Dependency]:
    deps = [Dependency(group_id="org.springframework.boot", artifact_id="spring-boot-starter")]
    if layout.id == "kotlin":
        deps.append(Dependency(group_id="org.jetbrains.kotlin", artifact_id="kotlin-reflect"))
    elif layout.id == "groovy":
        deps.append(Dependency(group_id="org.apache.groovy", artifact_id="groovy"))
    if is_war:
        deps.append(Dependency(
            group_id="org.springframework.boot",
            artifact_id="spring-boot-starter-tomcat",
            scope=DependencyScope.PROVIDED,
        ))
    deps.append(Dependency(
        group_id="org.springframework.boot",
        artifact_id="spring-boot-starter-test",
        scope=DependencyScope.TEST,
    ))
    if layout.id == "kotlin":
        deps.append(Dependency(
            group_id="org.jetbrains.kotlin",
            artifact_id="kotlin-test-junit5",
            scope=DependencyScope.TEST,
        ))
    return deps


def _gradle_configuration(scope: DependencyScope, is_war: bool) -> str:
    if scope is DependencyScope.PROVIDED:
        return "providedRuntime" if is_war else "compileOnly"
    return {
        DependencyScope.COMPILE: "implementation",
        DependencyScope.COMPILE_ONLY: "compileOnly",
        DependencyScope.RUNTIME: "runtimeOnly",
        DependencyScope.TEST: "testImplementation",
    }[scope]


def _dependency_context(
    descriptor: ProjectDescriptor, layout: LanguageLayout, is_war: bool
) -> list[dict[str, Any]]:
    """Merge built-in and declared dependencies, grouped by scope.

    A declared dependency with the same coordinates as a built-in one
    replaces it.
    """
    declared = {(d.group_id, d.artifact_id): d for d in descriptor.dependencies}
    merged: list[Dependency] = []
    for dep in _builtin_dependencies(layout, is_war):
        merged.append(declared.pop((dep.group_id, dep.artifact_id), dep))
    merged.extend(declared.values())
    merged.sort(key=lambda d: _SCOPE_ORDER[d.scope])

    return [
        {
            "group_id": dep.group_id,
            "artifact_id": dep.artifact_id,
            "version": dep.version,
            "coordinates": dep.coordinates,
            "maven_scope": _MAVEN_SCOPES[dep.scope],
            "optional": dep.scope is DependencyScope.COMPILE_ONLY,
            "gradle_configuration": _gradle_configuration(dep.scope, is_war),
        }
        for dep in merged
    ]
