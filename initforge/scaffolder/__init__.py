"""initforge scaffolder -- generates JVM project structures.

This module takes a ``ProjectDescriptor`` as input, selects the template
family for its build system and language, renders every template in memory
and writes the result atomically to a target directory.

Quick usage::

    from initforge.models import BuildSystemSpec, ProjectDescriptor
    from initforge.scaffolder import ProjectGenerator

    descriptor = ProjectDescriptor(
        platform_version="3.4.3",
        build_system=BuildSystemSpec.for_id("maven"),
        group_id="com.example",
        artifact_id="my-app",
        package_name="com.example.myapp",
        application_name="MyAppApplication",
    )
    manifest = await ProjectGenerator().generate(descriptor, "/tmp/my-app")
"""

from initforge.scaffolder.generator import ProjectGenerator, descriptor_from_request
from initforge.scaffolder.materializer import MaterializationError, ProjectMaterializer
from initforge.scaffolder.render import RenderEngine, TemplateRenderError
from initforge.scaffolder.resolver import (
    TemplateKind,
    TemplateResolver,
    TemplateSet,
    TemplateSpec,
    UnsupportedCombination,
)
from initforge.scaffolder.templates import TemplateRenderer
from initforge.scaffolder.wrapper_gen import WrapperAsset, select_wrapper

__all__ = [
    "MaterializationError",
    "ProjectGenerator",
    "ProjectMaterializer",
    "RenderEngine",
    "TemplateKind",
    "TemplateRenderError",
    "TemplateRenderer",
    "TemplateResolver",
    "TemplateSet",
    "TemplateSpec",
    "UnsupportedCombination",
    "WrapperAsset",
    "descriptor_from_request",
    "select_wrapper",
]
