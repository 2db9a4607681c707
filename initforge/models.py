"""Pydantic v2 models describing a project to scaffold and its rendered output.

Defines the descriptor hierarchy (build system, language, packaging,
dependencies), platform version handling, and the in-memory artifacts that
flow from the render engine to the materializer.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAVEN = "maven"
GRADLE = "gradle"
DIALECT_GROOVY = "groovy"
DIALECT_KOTLIN = "kotlin"


# ---------------------------------------------------------------------------
# Platform versions
# ---------------------------------------------------------------------------

_VERSION_RE = re.compile(
    r"^(\d+)\.(\d+)(?:\.(\d+))?(?:[.-]([A-Za-z]+(?:-[A-Za-z]+)?)(\d*))?$"
)

# Qualifier ordering: snapshots < milestones < release candidates < releases.
_QUALIFIER_RANK: dict[str, int] = {
    "BUILD-SNAPSHOT": 0,
    "SNAPSHOT": 0,
    "M": 1,
    "RC": 2,
    "RELEASE": 3,
    "GA": 3,
}


@functools.total_ordering
@dataclass(frozen=True)
class Version:
    """A platform version such as ``3.4.3``, ``3.5.0-SNAPSHOT`` or ``3.4.0-RC1``."""

    major: int
    minor: int
    patch: int = 0
    qualifier: Optional[str] = None
    qualifier_version: int = 0

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse *text* into a ``Version``.

        Raises:
            ValueError: If *text* is not a recognised version string.
        """
        match = _VERSION_RE.match((text or "").strip())
        if match is None:
            raise ValueError(f"Invalid version: {text!r}")
        major, minor, patch, qualifier, qualifier_version = match.groups()
        if qualifier is not None:
            qualifier = qualifier.upper()
            if qualifier not in _QUALIFIER_RANK:
                raise ValueError(f"Unknown version qualifier in {text!r}: {qualifier}")
        return cls(
            major=int(major),
            minor=int(minor),
            patch=int(patch or 0),
            qualifier=qualifier,
            qualifier_version=int(qualifier_version) if qualifier_version else 0,
        )

    def _key(self) -> tuple[int, int, int, int, int]:
        rank = _QUALIFIER_RANK.get(self.qualifier, 3) if self.qualifier else 3
        return (self.major, self.minor, self.patch, rank, self.qualifier_version)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if not self.qualifier:
            return base
        suffix = f"{self.qualifier_version}" if self.qualifier_version else ""
        return f"{base}-{self.qualifier}{suffix}"


@dataclass(frozen=True)
class VersionRange:
    """A Maven-style version range.

    ``[3.3.0,4.0.0)`` includes 3.3.0 and excludes 4.0.0.  A bare version such
    as ``3.0.0`` means "3.0.0 or later".
    """

    lower: Version
    lower_inclusive: bool = True
    upper: Optional[Version] = None
    upper_inclusive: bool = False

    @classmethod
    def parse(cls, text: str) -> "VersionRange":
        raw = (text or "").strip()
        if not raw:
            raise ValueError("Empty version range")
        if raw[0] not in "[(":
            return cls(lower=Version.parse(raw))
        if raw[-1] not in "])" or "," not in raw:
            raise ValueError(f"Invalid version range: {text!r}")
        low, high = (part.strip() for part in raw[1:-1].split(",", 1))
        return cls(
            lower=Version.parse(low),
            lower_inclusive=raw[0] == "[",
            upper=Version.parse(high) if high else None,
            upper_inclusive=raw[-1] == "]",
        )

    def match(self, version: Version) -> bool:
        if version < self.lower or (version == self.lower and not self.lower_inclusive):
            return False
        if self.upper is None:
            return True
        if self.upper_inclusive:
            return version <= self.upper
        return version < self.upper

    def __contains__(self, version: object) -> bool:
        return isinstance(version, Version) and self.match(version)

    def __str__(self) -> str:
        if self.upper is None and self.lower_inclusive:
            return str(self.lower)
        start = "[" if self.lower_inclusive else "("
        end = "]" if self.upper_inclusive else ")"
        upper = str(self.upper) if self.upper is not None else ""
        return f"{start}{self.lower},{upper}{end}"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Packaging(str, Enum):
    """Archive produced by the generated project."""
    JAR = "jar"
    WAR = "war"


class DependencyScope(str, Enum):
    """Where a declared dependency is visible in the generated build."""
    COMPILE = "compile"
    RUNTIME = "runtime"
    COMPILE_ONLY = "compile_only"
    PROVIDED = "provided"
    TEST = "test"


# ---------------------------------------------------------------------------
# Build system & language
# ---------------------------------------------------------------------------

class BuildSystemSpec(BaseModel):
    """Build system id plus the optional configuration-language dialect."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Build system id: 'maven' or 'gradle'")
    dialect: Optional[str] = Field(
        default=None, description="Gradle only: 'groovy' or 'kotlin'"
    )

    @classmethod
    def for_id(cls, build_system_id: str) -> "BuildSystemSpec":
        """Return the spec for *build_system_id* with its default dialect.

        Gradle defaults to the Groovy DSL; Maven has no dialect.
        """
        dialect = DIALECT_GROOVY if build_system_id == GRADLE else None
        return cls(id=build_system_id, dialect=dialect)

    @classmethod
    def for_id_and_dialect(cls, build_system_id: str, dialect: str) -> "BuildSystemSpec":
        return cls(id=build_system_id, dialect=dialect)

    def __str__(self) -> str:
        return f"{self.id}-{self.dialect}" if self.dialect else self.id


class Language(BaseModel):
    """Source language and the JVM version it targets."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Language id: 'java', 'kotlin' or 'groovy'")
    version: str = Field(default="17", description="Target JVM version, e.g. '21'")

    @classmethod
    def for_id(cls, language_id: str, version: Optional[str] = None) -> "Language":
        if version is None:
            return cls(id=language_id)
        return cls(id=language_id, version=version)

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not re.fullmatch(r"\d+(\.\d+)*", value):
            raise ValueError(f"Invalid JVM version: {value!r}")
        return value

    def __str__(self) -> str:
        return f"{self.id} {self.version}"


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

_COORDINATE_RE = re.compile(r"^[a-z0-9_-]+(\.[a-z0-9_-]+)*$")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_JAVA_KEYWORDS = frozenset({
    "abstract", "assert", "boolean", "break", "byte", "case", "catch", "char",
    "class", "const", "continue", "default", "do", "double", "else", "enum",
    "extends", "false", "final", "finally", "float", "for", "goto", "if",
    "implements", "import", "instanceof", "int", "interface", "long", "native",
    "new", "null", "package", "private", "protected", "public", "return",
    "short", "static", "strictfp", "super", "switch", "synchronized", "this",
    "throw", "throws", "transient", "true", "try", "void", "volatile", "while",
})


def _check_identifier(value: str, what: str) -> str:
    if not _IDENTIFIER_RE.match(value) or value in _JAVA_KEYWORDS:
        raise ValueError(f"Invalid {what}: {value!r}")
    return value


class Dependency(BaseModel):
    """An explicitly declared build dependency, written verbatim."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., description="Maven groupId")
    artifact_id: str = Field(..., description="Maven artifactId")
    version: Optional[str] = Field(
        default=None, description="Explicit version, None when platform-managed"
    )
    scope: DependencyScope = Field(default=DependencyScope.COMPILE)

    @property
    def coordinates(self) -> str:
        base = f"{self.group_id}:{self.artifact_id}"
        return f"{base}:{self.version}" if self.version else base


class ProjectDescriptor(BaseModel):
    """Immutable description of the project to generate."""

    model_config = ConfigDict(frozen=True)

    platform_version: str = Field(..., description="Spring Boot version, e.g. '3.4.3'")
    build_system: BuildSystemSpec
    language: Language = Field(default_factory=lambda: Language(id="java"))
    packaging: Packaging = Field(default=Packaging.JAR)
    group_id: str = Field(..., description="Maven groupId of the generated project")
    artifact_id: str = Field(..., description="Maven artifactId of the generated project")
    version: str = Field(default="0.0.1-SNAPSHOT")
    name: Optional[str] = Field(default=None, description="Display name, defaults to artifact_id")
    description: str = Field(default="")
    application_name: Optional[str] = Field(
        default=None, description="Main class name, e.g. 'MyAppApplication'"
    )
    package_name: Optional[str] = Field(
        default=None, description="Root package, e.g. 'com.example.myapp'"
    )
    dependencies: tuple[Dependency, ...] = Field(default=())

    @field_validator("platform_version")
    @classmethod
    def _check_platform_version(cls, value: str) -> str:
        Version.parse(value)
        return value

    @field_validator("group_id", "artifact_id")
    @classmethod
    def _check_coordinate(cls, value: str) -> str:
        if not _COORDINATE_RE.match(value):
            raise ValueError(
                f"Must be non-empty lowercase dot-separated tokens: {value!r}"
            )
        return value

    @field_validator("package_name")
    @classmethod
    def _check_package_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        for segment in value.split("."):
            _check_identifier(segment, "package segment")
        return value

    @field_validator("application_name")
    @classmethod
    def _check_application_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _check_identifier(value, "application class name")

    @property
    def platform(self) -> Version:
        """The parsed platform version."""
        return Version.parse(self.platform_version)

    @property
    def project_name(self) -> str:
        return self.name or self.artifact_id


# ---------------------------------------------------------------------------
# Rendered output
# ---------------------------------------------------------------------------

class RenderedFile(BaseModel):
    """One rendered artifact: a relative posix path, its bytes, and its mode."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path relative to the project root, '/' separated")
    content: bytes
    executable: bool = False

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        pure = PurePosixPath(value)
        if not value or pure.is_absolute() or ".." in pure.parts or "\\" in value:
            raise ValueError(f"Rendered path must be relative and inside the project: {value!r}")
        return str(pure)

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


class ManifestEntry(BaseModel):
    """A single written file, as recorded in the manifest."""
    path: str
    executable: bool = False
    size: int = 0


class Manifest(BaseModel):
    """Ordered record of everything written for one generation request."""

    root: Path
    entries: list[ManifestEntry] = Field(default_factory=list)

    @classmethod
    def from_files(cls, root: Path, files: list[RenderedFile]) -> "Manifest":
        return cls(
            root=root,
            entries=[
                ManifestEntry(path=f.path, executable=f.executable, size=len(f.content))
                for f in files
            ],
        )

    @property
    def paths(self) -> list[str]:
        return [entry.path for entry in self.entries]

    @property
    def executables(self) -> list[str]:
        return [entry.path for entry in self.entries if entry.executable]

    def save(self, path: Path) -> Path:
        """Persist the manifest as JSON and return the written path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Manifest":
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))

