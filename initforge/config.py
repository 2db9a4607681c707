"""initforge configuration.

Centralised, typed configuration for the scaffolding pipeline. All settings use
Pydantic v2 models so they can be validated at construction time and serialised
to/from JSON or environment variables without boiler-plate.

A ``GeneratorConfig`` is immutable: one instance is built up front and passed
explicitly to every resolver, renderer and generator, so concurrent generation
requests only ever share read-only data.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from initforge.models import Version, VersionRange


class VersionMapping(BaseModel):
    """One row of a version table: platform range -> version string."""

    model_config = ConfigDict(frozen=True)

    range: str = Field(..., description="Platform version range, e.g. '[3.3.0,4.0.0)'")
    version: str = Field(..., description="Version selected for platforms in the range")

    @field_validator("range")
    @classmethod
    def _check_range(cls, value: str) -> str:
        VersionRange.parse(value)
        return value

    def matches(self, platform: Version) -> bool:
        return VersionRange.parse(self.range).match(platform)


class VersionTable(BaseModel):
    """Ordered platform-range -> version lookup.

    The first mapping (in declared order) whose range contains the platform
    version wins.  Tables are plain data so callers can swap in their own
    compatibility rules without touching the engine.
    """

    model_config = ConfigDict(frozen=True)

    mappings: tuple[VersionMapping, ...] = Field(default=())

    @classmethod
    def of(cls, entries: dict[str, str]) -> "VersionTable":
        """Build a table from a ``{range: version}`` dict (insertion order kept)."""
        return cls(
            mappings=tuple(VersionMapping(range=r, version=v) for r, v in entries.items())
        )

    def resolve(self, platform: Version | str) -> Optional[str]:
        """Return the version mapped to *platform*, or ``None`` if no range matches."""
        if isinstance(platform, str):
            platform = Version.parse(platform)
        for mapping in self.mappings:
            if mapping.matches(platform):
                return mapping.version
        return None


def _default_maven_wrapper() -> VersionTable:
    return VersionTable.of({"[3.0.0,5.0.0)": "3.9.12"})


def _default_gradle_wrapper() -> VersionTable:
    return VersionTable.of({
        "[3.0.0,3.3.0)": "8.7",
        "[3.3.0,4.0.0)": "8.14.4",
        "[4.0.0,5.0.0)": "9.2.1",
    })


def _default_kotlin() -> VersionTable:
    return VersionTable.of({
        "[3.0.0,4.0.0)": "1.9.25",
        "[4.0.0,5.0.0)": "2.2.21",
    })


class GeneratorConfig(BaseModel):
    """Global initforge configuration.

    Holds the platform coordinates, plugin versions and the pluggable version
    tables used to pick wrapper distributions and language plugin versions.
    """

    model_config = ConfigDict(frozen=True)

    platform_group_id: str = Field(default="org.springframework.boot")
    platform_parent_artifact_id: str = Field(default="spring-boot-starter-parent")
    platform_plugin_id: str = Field(default="org.springframework.boot")
    dependency_management_plugin_version: str = Field(default="1.1.7")
    test_class_suffix: str = Field(
        default="Tests", description="Appended to the application class name for the test class"
    )
    maven_wrapper_version: str = Field(
        default="3.3.4", description="Version of the Maven wrapper scripts themselves"
    )
    maven_wrapper: VersionTable = Field(default_factory=_default_maven_wrapper)
    gradle_wrapper: VersionTable = Field(default_factory=_default_gradle_wrapper)
    kotlin: VersionTable = Field(default_factory=_default_kotlin)

    @field_validator("test_class_suffix")
    @classmethod
    def _check_suffix(cls, value: str) -> str:
        if not value or not value.isidentifier():
            raise ValueError(f"Test class suffix must be an identifier fragment: {value!r}")
        return value

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def wrapper_table(self, build_system_id: str) -> VersionTable:
        """Return the wrapper distribution table for *build_system_id*.

        Raises:
            KeyError: If the build system has no wrapper table.
        """
        tables = {"maven": self.maven_wrapper, "gradle": self.gradle_wrapper}
        return tables[build_system_id]

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "GeneratorConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            INITFORGE_CONFIG (JSON file used as the starting point),
            INITFORGE_DEPENDENCY_MANAGEMENT_VERSION,
            INITFORGE_TEST_CLASS_SUFFIX, INITFORGE_MAVEN_WRAPPER_VERSION.
        """
        base = cls()
        if os.environ.get("INITFORGE_CONFIG"):
            base = cls.load(Path(os.environ["INITFORGE_CONFIG"]))

        overrides: dict[str, Any] = {}
        if os.environ.get("INITFORGE_DEPENDENCY_MANAGEMENT_VERSION"):
            overrides["dependency_management_plugin_version"] = os.environ[
                "INITFORGE_DEPENDENCY_MANAGEMENT_VERSION"
            ]
        if os.environ.get("INITFORGE_TEST_CLASS_SUFFIX"):
            overrides["test_class_suffix"] = os.environ["INITFORGE_TEST_CLASS_SUFFIX"]
        if os.environ.get("INITFORGE_MAVEN_WRAPPER_VERSION"):
            overrides["maven_wrapper_version"] = os.environ["INITFORGE_MAVEN_WRAPPER_VERSION"]

        if not overrides:
            return base
        return cls.model_validate({**base.model_dump(), **overrides})
