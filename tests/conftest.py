"""Shared pytest fixtures for the initforge test suite.

Provides reusable fixtures for:
- Generator configuration
- Project descriptors for every build system / language pair
- Rendered file lists ready for the materializer
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from initforge.config import GeneratorConfig
from initforge.models import (
    BuildSystemSpec,
    Language,
    ProjectDescriptor,
    RenderedFile,
)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> GeneratorConfig:
    """Default generator configuration."""
    return GeneratorConfig()


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

@pytest.fixture
def make_descriptor() -> Callable[..., ProjectDescriptor]:
    """Factory building a ``ProjectDescriptor`` for the sample "my-app" project.

    Keyword arguments override individual fields; ``build_system`` may be
    given as ``"maven"``, ``"gradle"``, ``"gradle-kotlin"`` or a spec, and
    ``language`` as a bare language id.
    """

    def _make(
        build_system: str | BuildSystemSpec = "maven",
        language: str | Language = "java",
        **overrides: Any,
    ) -> ProjectDescriptor:
        if isinstance(build_system, str):
            if build_system == "gradle-kotlin":
                build_system = BuildSystemSpec.for_id_and_dialect("gradle", "kotlin")
            else:
                build_system = BuildSystemSpec.for_id(build_system)
        if isinstance(language, str):
            language = Language.for_id(language)
        fields: dict[str, Any] = {
            "platform_version": "3.4.3",
            "build_system": build_system,
            "language": language,
            "group_id": "com.example",
            "artifact_id": "my-app",
            "name": "my-app",
            "description": "Demo project for Spring Boot",
            "package_name": "com.example.myapp",
            "application_name": "MyAppApplication",
        }
        fields.update(overrides)
        return ProjectDescriptor(**fields)

    return _make


@pytest.fixture
def maven_descriptor(make_descriptor) -> ProjectDescriptor:
    """Maven / Java descriptor on Spring Boot 3.4.3."""
    return make_descriptor("maven")


@pytest.fixture
def gradle_descriptor(make_descriptor) -> ProjectDescriptor:
    """Gradle (Groovy DSL) / Java descriptor on Spring Boot 3.4.3."""
    return make_descriptor("gradle")


# ---------------------------------------------------------------------------
# Rendered files
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_files() -> list[RenderedFile]:
    """A small, hand-made set of rendered files with one executable script."""
    return [
        RenderedFile(path="build.txt", content=b"build\n"),
        RenderedFile(path="bin/run", content=b"#!/bin/sh\necho run\n", executable=True),
        RenderedFile(path="src/main/App.txt", content=b"app\n"),
    ]


@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Target path for a generated project (not created up front)."""
    return tmp_path / "my-app"
