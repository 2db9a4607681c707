"""Parsers for generated build files.

Maven POMs are parsed with ``xml.etree``; Gradle scripts (Groovy and Kotlin
DSL) are scanned line by line, which is enough for the flat layout the
scaffolder produces.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional

_POM_NS = {"m": "http://maven.apache.org/POM/4.0.0"}


@dataclass(frozen=True)
class Coordinates:
    group_id: Optional[str]
    artifact_id: Optional[str]
    version: Optional[str]


@dataclass(frozen=True)
class MavenDependency:
    group_id: str
    artifact_id: str
    version: Optional[str] = None
    scope: Optional[str] = None
    optional: bool = False


@dataclass(frozen=True)
class MavenBuild:
    """The parts of a ``pom.xml`` the inspector can answer questions about."""

    parent: Optional[Coordinates]
    coordinates: Coordinates
    packaging: str
    name: Optional[str]
    description: Optional[str]
    properties: dict[str, str]
    dependencies: tuple[MavenDependency, ...]

    @property
    def group_id(self) -> Optional[str]:
        return self.coordinates.group_id

    @property
    def artifact_id(self) -> Optional[str]:
        return self.coordinates.artifact_id

    @property
    def version(self) -> Optional[str]:
        return self.coordinates.version

    def has_dependency(self, group_id: str, artifact_id: str) -> bool:
        return any(
            d.group_id == group_id and d.artifact_id == artifact_id
            for d in self.dependencies
        )


@dataclass(frozen=True)
class GradlePlugin:
    id: str
    version: Optional[str] = None


@dataclass(frozen=True)
class GradleBuild:
    """Plugins and project coordinates declared in a Gradle build script."""

    dialect: str
    plugins: tuple[GradlePlugin, ...]
    group: Optional[str]
    version: Optional[str]
    description: Optional[str]
    dependencies: tuple[str, ...]

    def plugin(self, plugin_id: str) -> Optional[GradlePlugin]:
        for plugin in self.plugins:
            if plugin.id == plugin_id:
                return plugin
        return None

    def has_plugin(self, plugin_id: str, version: Optional[str] = None) -> bool:
        plugin = self.plugin(plugin_id)
        if plugin is None:
            return False
        return version is None or plugin.version == version


# ---------------------------------------------------------------------------
# Maven
# ---------------------------------------------------------------------------

def parse_pom(content: str) -> MavenBuild:
    """Parse POM text.

    Raises:
        ValueError: If *content* is not well-formed XML or not a POM.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise ValueError(f"Malformed pom.xml: {exc}") from exc
    if root.tag != f"{{{_POM_NS['m']}}}project":
        raise ValueError(f"Not a Maven POM, root element is {root.tag}")

    parent_el = root.find("m:parent", _POM_NS)
    parent = _coordinates(parent_el) if parent_el is not None else None

    properties: dict[str, str] = {}
    props_el = root.find("m:properties", _POM_NS)
    if props_el is not None:
        for prop in props_el:
            properties[_local_name(prop.tag)] = (prop.text or "").strip()

    dependencies = tuple(
        MavenDependency(
            group_id=_text(dep, "groupId") or "",
            artifact_id=_text(dep, "artifactId") or "",
            version=_text(dep, "version"),
            scope=_text(dep, "scope"),
            optional=_text(dep, "optional") == "true",
        )
        for dep in root.findall("m:dependencies/m:dependency", _POM_NS)
    )

    return MavenBuild(
        parent=parent,
        coordinates=_coordinates(root),
        packaging=_text(root, "packaging") or "jar",
        name=_text(root, "name"),
        description=_text(root, "description"),
        properties=properties,
        dependencies=dependencies,
    )


def _text(element: ET.Element, tag: str) -> Optional[str]:
    child = element.find(f"m:{tag}", _POM_NS)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def _coordinates(element: ET.Element) -> Coordinates:
    return Coordinates(
        group_id=_text(element, "groupId"),
        artifact_id=_text(element, "artifactId"),
        version=_text(element, "version"),
    )


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


# ---------------------------------------------------------------------------
# Gradle
# ---------------------------------------------------------------------------

# id 'org.springframework.boot' version '3.4.3'
_GROOVY_PLUGIN_RE = re.compile(
    r"""^id\s+['"]([^'"]+)['"](?:\s+version\s+['"]([^'"]+)['"])?$"""
)
# id("org.springframework.boot") version "3.4.3"  /  kotlin("jvm") version "1.9.25"
_KOTLIN_PLUGIN_RE = re.compile(
    r"""^(id|kotlin)\("([^"]+)"\)(?:\s+version\s+"([^"]+)")?$"""
)
_CORE_PLUGIN_RE = re.compile(r"^([a-z][a-z-]*)$")
_PROPERTY_RE = re.compile(r"""^(group|version|description)\s*=\s*(['"])(.*)\2$""")
_GROOVY_DEP_RE = re.compile(r"""^[A-Za-z]+\s+['"]([^'"]+)['"]$""")
_KOTLIN_DEP_RE = re.compile(r"""^[A-Za-z]+\("([^"]+)"\)$""")


def parse_gradle(content: str, dialect: str) -> GradleBuild:
    """Parse a Groovy (``dialect="groovy"``) or Kotlin DSL build script."""
    plugins: list[GradlePlugin] = []
    properties: dict[str, str] = {}
    dependencies: list[str] = []
    block: Optional[str] = None
    depth = 0

    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("//"):
            continue
        if depth == 0 and line.endswith("{"):
            block = line[:-1].strip()
        if block == "plugins" and depth == 1:
            plugin = _parse_plugin(line, dialect)
            if plugin is not None:
                plugins.append(plugin)
        elif block == "dependencies" and depth == 1:
            dep_re = _KOTLIN_DEP_RE if dialect == "kotlin" else _GROOVY_DEP_RE
            match = dep_re.match(line)
            if match:
                dependencies.append(match.group(1))
        elif depth == 0:
            match = _PROPERTY_RE.match(line)
            if match:
                properties[match.group(1)] = match.group(3)

        depth += line.count("{") - line.count("}")
        if depth == 0:
            block = None

    return GradleBuild(
        dialect=dialect,
        plugins=tuple(plugins),
        group=properties.get("group"),
        version=properties.get("version"),
        description=properties.get("description"),
        dependencies=tuple(dependencies),
    )


def _parse_plugin(line: str, dialect: str) -> Optional[GradlePlugin]:
    if dialect == "kotlin":
        match = _KOTLIN_PLUGIN_RE.match(line)
        if match:
            kind, name, version = match.groups()
            plugin_id = f"org.jetbrains.kotlin.{name}" if kind == "kotlin" else name
            return GradlePlugin(id=plugin_id, version=version)
    else:
        match = _GROOVY_PLUGIN_RE.match(line)
        if match:
            return GradlePlugin(id=match.group(1), version=match.group(2))
    match = _CORE_PLUGIN_RE.match(line)
    if match:
        return GradlePlugin(id=match.group(1))
    return None
