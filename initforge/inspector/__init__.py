"""initforge inspector -- read-only queries over a generated project tree.

Quick usage::

    from initforge.inspector import ProjectStructure

    structure = ProjectStructure.from_directory("/tmp/my-app")
    assert structure.has_maven_build()
    assert structure.maven_build().parent.version == "3.4.3"
"""

from initforge.inspector.build_files import (
    Coordinates,
    GradleBuild,
    GradlePlugin,
    MavenBuild,
    MavenDependency,
)
from initforge.inspector.structure import JvmModule, ProjectStructure
from initforge.inspector.tree import NotFound, ProjectTree

__all__ = [
    "Coordinates",
    "GradleBuild",
    "GradlePlugin",
    "JvmModule",
    "MavenBuild",
    "MavenDependency",
    "NotFound",
    "ProjectStructure",
    "ProjectTree",
]
