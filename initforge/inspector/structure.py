"""Structure inspector: assertions-friendly queries over a generated project.

Every query works on an immutable ``ProjectTree`` snapshot.  Existence
queries (``has_*``, ``is_executable``) always answer; queries about a file's
content (``contains``, ``has_line``, ``maven_build``, ``wrapper_distribution``...)
raise ``NotFound`` when the file or field they need is absent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from initforge.models import DIALECT_GROOVY, DIALECT_KOTLIN, GRADLE, MAVEN
from initforge.scaffolder.resolver import LANGUAGES, LanguageLayout
from initforge.utils import package_path

from .build_files import Coordinates, GradleBuild, MavenBuild, parse_gradle, parse_pom
from .tree import NotFound, ProjectTree

BUILD_FILES: dict[str, str] = {
    "maven": "pom.xml",
    "gradle-groovy": "build.gradle",
    "gradle-kotlin": "build.gradle.kts",
}

_WRAPPER_PROPERTIES: dict[str, str] = {
    MAVEN: ".mvn/wrapper/maven-wrapper.properties",
    GRADLE: "gradle/wrapper/gradle-wrapper.properties",
}

_WRAPPER_SCRIPTS: dict[str, tuple[str, str]] = {
    MAVEN: ("mvnw", "mvnw.cmd"),
    GRADLE: ("gradlew", "gradlew.bat"),
}

_DISTRIBUTION_URL_RE = re.compile(r"^distributionUrl=(.+)$", re.MULTILINE)
_DISTRIBUTION_VERSION_RE = re.compile(r"(?:apache-maven|gradle)-([^/]+?)-(?:bin|all)\.zip$")


@dataclass(frozen=True)
class JvmModule:
    """Source-set view of a project for one JVM language."""

    tree: ProjectTree
    layout: LanguageLayout

    def main_source(self, package_name: str, class_name: str) -> str:
        return f"{self.layout.main_root}/{package_path(package_name)}/{class_name}.{self.layout.extension}"

    def test_source(self, package_name: str, class_name: str) -> str:
        return f"{self.layout.test_root}/{package_path(package_name)}/{class_name}.{self.layout.extension}"

    def has_main_source(self, package_name: str, class_name: str) -> bool:
        return self.main_source(package_name, class_name) in self.tree

    def has_test_source(self, package_name: str, class_name: str) -> bool:
        return self.test_source(package_name, class_name) in self.tree


class ProjectStructure:
    """Read-only queries over a generated project directory."""

    def __init__(self, tree: ProjectTree) -> None:
        self.tree = tree

    @classmethod
    def from_directory(cls, root: str | Path) -> "ProjectStructure":
        """Snapshot *root* and wrap it.

        Raises:
            NotFound: If *root* is not a directory.
        """
        return cls(ProjectTree.load(root))

    @property
    def root(self) -> Path:
        return self.tree.root

    # -- Build files -------------------------------------------------------

    def has_build_file(self, kind: str) -> bool:
        """Return whether the build file for *kind* exists.

        *kind* is ``"maven"``, ``"gradle-groovy"`` or ``"gradle-kotlin"``.

        Raises:
            ValueError: If *kind* is not a known build file kind.
        """
        try:
            return BUILD_FILES[kind] in self.tree
        except KeyError:
            raise ValueError(
                f"Unknown build file kind {kind!r}; expected one of {', '.join(BUILD_FILES)}"
            ) from None

    def has_maven_build(self) -> bool:
        return self.has_build_file("maven")

    def has_groovy_dsl_gradle_build(self) -> bool:
        return self.has_build_file("gradle-groovy")

    def has_kotlin_dsl_gradle_build(self) -> bool:
        return self.has_build_file("gradle-kotlin")

    def maven_build(self) -> MavenBuild:
        """Parse ``pom.xml``.

        Raises:
            NotFound: If there is no ``pom.xml``, or it cannot be parsed.
        """
        path = BUILD_FILES["maven"]
        try:
            return parse_pom(self.tree.read_text(path))
        except ValueError as exc:
            raise NotFound(f"Cannot read Maven build: {exc}", path=path) from exc

    def maven_parent(self) -> Coordinates:
        """Return the complete ``<parent>`` coordinates of ``pom.xml``.

        Raises:
            NotFound: If there is no ``pom.xml``, it has no ``<parent>``, or
                the parent lacks a groupId, artifactId or version.
        """
        path = BUILD_FILES["maven"]
        parent = self.maven_build().parent
        if parent is None:
            raise NotFound(f"{path} declares no parent", path=path)
        _require_complete(parent, f"{path} parent", path)
        return parent

    def maven_coordinates(self) -> Coordinates:
        """Return the project coordinates of ``pom.xml``.

        A missing groupId or version is inherited from ``<parent>``.

        Raises:
            NotFound: If there is no ``pom.xml`` or a coordinate is absent
                from both the project and its parent.
        """
        path = BUILD_FILES["maven"]
        build = self.maven_build()
        inherited = build.parent or Coordinates(None, None, None)
        coordinates = Coordinates(
            group_id=build.group_id or inherited.group_id,
            artifact_id=build.artifact_id,
            version=build.version or inherited.version,
        )
        _require_complete(coordinates, f"{path} project", path)
        return coordinates

    def gradle_build(self, dialect: str = DIALECT_GROOVY) -> GradleBuild:
        """Parse ``build.gradle`` (Groovy) or ``build.gradle.kts`` (Kotlin).

        Raises:
            NotFound: If the build script for *dialect* is absent.
        """
        if dialect not in (DIALECT_GROOVY, DIALECT_KOTLIN):
            raise ValueError(f"Unknown Gradle dialect: {dialect!r}")
        path = BUILD_FILES[f"gradle-{dialect}"]
        return parse_gradle(self.tree.read_text(path), dialect)

    # -- Wrappers ----------------------------------------------------------

    def has_maven_wrapper(self) -> bool:
        return self._has_wrapper(MAVEN)

    def has_gradle_wrapper(self) -> bool:
        return self._has_wrapper(GRADLE)

    def wrapper_distribution(self, build_system: str) -> str:
        """Return the ``distributionUrl`` of the wrapper for *build_system*.

        Properties-file escaping (``https\\://``) is undone.

        Raises:
            NotFound: If the wrapper properties file or the key is missing.
        """
        path = _WRAPPER_PROPERTIES.get(build_system)
        if path is None:
            raise NotFound(f"No wrapper known for build system {build_system!r}")
        match = _DISTRIBUTION_URL_RE.search(self.tree.read_text(path))
        if match is None:
            raise NotFound(f"{path} has no distributionUrl", path=path)
        return match.group(1).strip().replace("\\:", ":")

    def wrapper_distribution_version(self, build_system: str) -> str:
        """Return the distribution version the wrapper pins, e.g. ``8.14.4``.

        Raises:
            NotFound: If the wrapper is missing or its ``distributionUrl`` does
                not name a Maven or Gradle distribution archive.
        """
        url = self.wrapper_distribution(build_system)
        match = _DISTRIBUTION_VERSION_RE.search(url)
        if match is None:
            raise NotFound(
                f"Cannot tell the distribution version from {url}",
                path=_WRAPPER_PROPERTIES[build_system],
            )
        return match.group(1)

    def _has_wrapper(self, build_system: str) -> bool:
        script, windows_script = _WRAPPER_SCRIPTS[build_system]
        return (
            _WRAPPER_PROPERTIES[build_system] in self.tree
            and script in self.tree
            and windows_script in self.tree
        )

    # -- Sources -----------------------------------------------------------

    def as_jvm_module(self, language: str) -> JvmModule:
        """Return the source-set view for *language*.

        Raises:
            ValueError: If *language* is not a known JVM language.
        """
        layout = LANGUAGES.get(language)
        if layout is None:
            raise ValueError(f"Unknown language: {language!r}")
        return JvmModule(tree=self.tree, layout=layout)

    # -- Files -------------------------------------------------------------

    def paths(self) -> list[str]:
        return self.tree.paths()

    def text_file(self, path: str) -> str:
        """Return the UTF-8 content of *path*.

        Raises:
            NotFound: If *path* is not a file in the project.
        """
        return self.tree.read_text(path)

    def contains(self, path: str, text: str) -> bool:
        """Return whether *path* contains *text*.

        Raises:
            NotFound: If *path* is not a file in the project.
        """
        return text in self.tree.read_text(path)

    def has_line(self, path: str, line: str) -> bool:
        """Return whether *path* has a line equal to *line*.

        Raises:
            NotFound: If *path* is not a file in the project.
        """
        return line in self.tree.read_text(path).splitlines()

    def is_executable(self, path: str) -> bool:
        return path in self.tree.executables

    def count(self, path: str, text: str) -> int:
        """Number of occurrences of *text* in *path*.

        Raises:
            NotFound: If *path* is not a file in the project.
        """
        return self.tree.read_text(path).count(text)


def _require_complete(coordinates: Coordinates, what: str, path: str) -> None:
    missing = [
        name
        for name, value in (
            ("groupId", coordinates.group_id),
            ("artifactId", coordinates.artifact_id),
            ("version", coordinates.version),
        )
        if not value
    ]
    if missing:
        raise NotFound(f"{what} has no {', '.join(missing)}", path=path)
