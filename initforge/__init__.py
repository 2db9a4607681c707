"""initforge -- template-driven JVM project scaffolding.

Describe a project with a ``ProjectDescriptor``, generate it with
``ProjectGenerator`` and check the result with ``ProjectStructure``.
"""

from initforge.config import GeneratorConfig, VersionMapping, VersionTable
from initforge.inspector import NotFound, ProjectStructure
from initforge.models import (
    BuildSystemSpec,
    Dependency,
    DependencyScope,
    Language,
    Manifest,
    Packaging,
    ProjectDescriptor,
    RenderedFile,
    Version,
    VersionRange,
)
from initforge.scaffolder import (
    MaterializationError,
    ProjectGenerator,
    TemplateRenderError,
    TemplateResolver,
    UnsupportedCombination,
)

__version__ = "0.1.0"

__all__ = [
    "BuildSystemSpec",
    "Dependency",
    "DependencyScope",
    "GeneratorConfig",
    "Language",
    "Manifest",
    "MaterializationError",
    "NotFound",
    "Packaging",
    "ProjectDescriptor",
    "ProjectGenerator",
    "ProjectStructure",
    "RenderedFile",
    "TemplateRenderError",
    "TemplateResolver",
    "UnsupportedCombination",
    "Version",
    "VersionMapping",
    "VersionRange",
    "VersionTable",
]
