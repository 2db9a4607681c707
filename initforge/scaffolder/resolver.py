"""Template family lookup.

Maps a ``(build system, dialect, language)`` tuple to the ordered set of
templates that make up a generated project.  The registry is built once at
import time from immutable values, so resolution is a pure lookup that is safe
to call from any number of concurrent generation requests.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from initforge.models import (
    DIALECT_GROOVY,
    DIALECT_KOTLIN,
    GRADLE,
    MAVEN,
    BuildSystemSpec,
    Language,
    Packaging,
)


class UnsupportedCombination(Exception):
    """Raised when no template family is registered for a build/language tuple."""

    def __init__(
        self, build_system: str, dialect: Optional[str], language: str
    ) -> None:
        self.build_system = build_system
        self.dialect = dialect
        self.language = language
        label = f"{build_system}-{dialect}" if dialect else build_system
        super().__init__(
            f"No template family for build system '{label}' with language '{language}'"
        )


class TemplateKind(str, Enum):
    """Role a template plays in the generated project."""
    BUILD = "build"
    SETTINGS = "settings"
    WRAPPER_PROPERTIES = "wrapper_properties"
    WRAPPER_SCRIPT = "wrapper_script"
    MAIN_SOURCE = "main_source"
    SERVLET_INITIALIZER = "servlet_initializer"
    TEST_SOURCE = "test_source"
    RESOURCE = "resource"
    IGNORE = "ignore"
    ATTRIBUTES = "attributes"


@dataclass(frozen=True)
class TemplateSpec:
    """A template id plus where (and how) its output is written.

    ``output`` may reference ``{main_root}``, ``{test_root}``,
    ``{package_path}``, ``{application_name}`` and ``{test_class_name}``;
    the render engine fills them in from the descriptor.
    """

    id: str
    kind: TemplateKind
    output: str
    executable: bool = False
    crlf: bool = False


@dataclass(frozen=True)
class LanguageLayout:
    """Source directory name and file extension for a JVM language."""

    id: str
    source_dir: str
    extension: str

    @property
    def main_root(self) -> str:
        return f"src/main/{self.source_dir}"

    @property
    def test_root(self) -> str:
        return f"src/test/{self.source_dir}"


@dataclass(frozen=True)
class TemplateSet:
    """Ordered templates for one build system / dialect / language family."""

    build_system: BuildSystemSpec
    language: LanguageLayout
    templates: tuple[TemplateSpec, ...]

    def __iter__(self) -> Iterator[TemplateSpec]:
        return iter(self.templates)

    def __len__(self) -> int:
        return len(self.templates)

    @property
    def ids(self) -> list[str]:
        return [t.id for t in self.templates]

    def of_kind(self, kind: TemplateKind) -> list[TemplateSpec]:
        return [t for t in self.templates if t.kind is kind]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

LANGUAGES: Mapping[str, LanguageLayout] = MappingProxyType({
    "java": LanguageLayout(id="java", source_dir="java", extension="java"),
    "kotlin": LanguageLayout(id="kotlin", source_dir="kotlin", extension="kt"),
    "groovy": LanguageLayout(id="groovy", source_dir="groovy", extension="groovy"),
})

_MAVEN_BUILD = (
    TemplateSpec("maven/pom.xml.j2", TemplateKind.BUILD, "pom.xml"),
    TemplateSpec(
        "maven/maven-wrapper.properties.j2",
        TemplateKind.WRAPPER_PROPERTIES,
        ".mvn/wrapper/maven-wrapper.properties",
    ),
    TemplateSpec("maven/mvnw.j2", TemplateKind.WRAPPER_SCRIPT, "mvnw", executable=True),
    TemplateSpec("maven/mvnw.cmd.j2", TemplateKind.WRAPPER_SCRIPT, "mvnw.cmd", crlf=True),
)

_GRADLE_WRAPPER = (
    TemplateSpec(
        "gradle/gradle-wrapper.properties.j2",
        TemplateKind.WRAPPER_PROPERTIES,
        "gradle/wrapper/gradle-wrapper.properties",
    ),
    TemplateSpec("gradle/gradlew.j2", TemplateKind.WRAPPER_SCRIPT, "gradlew", executable=True),
    TemplateSpec("gradle/gradlew.bat.j2", TemplateKind.WRAPPER_SCRIPT, "gradlew.bat", crlf=True),
)

_GRADLE_GROOVY_BUILD = (
    TemplateSpec("gradle/build.gradle.j2", TemplateKind.BUILD, "build.gradle"),
    TemplateSpec("gradle/settings.gradle.j2", TemplateKind.SETTINGS, "settings.gradle"),
) + _GRADLE_WRAPPER

_GRADLE_KOTLIN_BUILD = (
    TemplateSpec("gradle/build.gradle.kts.j2", TemplateKind.BUILD, "build.gradle.kts"),
    TemplateSpec("gradle/settings.gradle.kts.j2", TemplateKind.SETTINGS, "settings.gradle.kts"),
) + _GRADLE_WRAPPER

_BUILD_TEMPLATES: Mapping[tuple[str, Optional[str]], tuple[TemplateSpec, ...]] = MappingProxyType({
    (MAVEN, None): _MAVEN_BUILD,
    (GRADLE, DIALECT_GROOVY): _GRADLE_GROOVY_BUILD,
    (GRADLE, DIALECT_KOTLIN): _GRADLE_KOTLIN_BUILD,
})

_APPLICATION_PROPERTIES = TemplateSpec(
    "common/application.properties.j2",
    TemplateKind.RESOURCE,
    "src/main/resources/application.properties",
)


def _source_templates(layout: LanguageLayout) -> tuple[TemplateSpec, ...]:
    lang, ext = layout.id, layout.extension
    return (
        TemplateSpec(
            f"{lang}/Application.{ext}.j2",
            TemplateKind.MAIN_SOURCE,
            f"{{main_root}}/{{package_path}}/{{application_name}}.{ext}",
        ),
        TemplateSpec(
            f"{lang}/ApplicationTests.{ext}.j2",
            TemplateKind.TEST_SOURCE,
            f"{{test_root}}/{{package_path}}/{{test_class_name}}.{ext}",
        ),
    )


def _servlet_initializer(layout: LanguageLayout) -> TemplateSpec:
    ext = layout.extension
    return TemplateSpec(
        f"{layout.id}/ServletInitializer.{ext}.j2",
        TemplateKind.SERVLET_INITIALIZER,
        f"{{main_root}}/{{package_path}}/ServletInitializer.{ext}",
    )


def _family(build_system: str, dialect: Optional[str], language: str) -> TemplateSet:
    layout = LANGUAGES[language]
    build_templates = _BUILD_TEMPLATES[(build_system, dialect)]
    return TemplateSet(
        build_system=BuildSystemSpec(id=build_system, dialect=dialect),
        language=layout,
        templates=build_templates + _source_templates(layout) + (
            _APPLICATION_PROPERTIES,
            TemplateSpec(f"{build_system}/gitignore.j2", TemplateKind.IGNORE, ".gitignore"),
            TemplateSpec(f"{build_system}/gitattributes.j2", TemplateKind.ATTRIBUTES, ".gitattributes"),
        ),
    )


_REGISTRY: Mapping[tuple[str, Optional[str], str], TemplateSet] = MappingProxyType({
    (build_system, dialect, language): _family(build_system, dialect, language)
    for (build_system, dialect) in _BUILD_TEMPLATES
    for language in LANGUAGES
})


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class TemplateResolver:
    """Selects the template family for a build system and language.

    Stateless: every call consults the same read-only registry.
    """

    def resolve(
        self,
        build_system: BuildSystemSpec,
        language: Language | str,
        packaging: Packaging = Packaging.JAR,
    ) -> TemplateSet:
        """Return the ordered ``TemplateSet`` for the given combination.

        Args:
            build_system: Build system id and dialect.
            language: A ``Language`` or a bare language id.
            packaging: ``war`` adds the servlet initializer source.

        Raises:
            UnsupportedCombination: If no family is registered for the tuple.
        """
        language_id = language if isinstance(language, str) else language.id
        key = (build_system.id, build_system.dialect, language_id)
        family = _REGISTRY.get(key)
        if family is None:
            raise UnsupportedCombination(build_system.id, build_system.dialect, language_id)

        if Packaging(packaging) is not Packaging.WAR:
            return family

        servlet = _servlet_initializer(family.language)
        templates: list[TemplateSpec] = []
        for spec in family.templates:
            templates.append(spec)
            if spec.kind is TemplateKind.MAIN_SOURCE:
                templates.append(servlet)
        return replace(family, templates=tuple(templates))

    def supported(self) -> list[tuple[str, Optional[str], str]]:
        """Return every registered ``(build system, dialect, language)`` tuple."""
        return sorted(_REGISTRY, key=lambda k: (k[0], k[1] or "", k[2]))
