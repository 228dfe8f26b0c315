"""Swoft devtool -- class generation and project/component scaffolding.

Quick usage::

    from devtool import CodeGenerator, DevtoolConfig, GenerationOptions

    gen = CodeGenerator(DevtoolConfig.from_env())
    outcome = await gen.run("httpController", GenerationOptions(name="user"))
"""

from devtool.config import DevtoolConfig
from devtool.creator import ComponentCreator, ProjectCreator
from devtool.errors import DevtoolError
from devtool.scaffolder import (
    ArtifactType,
    CodeGenerator,
    GenerationOptions,
    GenerationOutcome,
    TemplateRenderer,
)

__version__ = "0.1.0"

__all__ = [
    "ArtifactType",
    "CodeGenerator",
    "ComponentCreator",
    "DevtoolConfig",
    "DevtoolError",
    "GenerationOptions",
    "GenerationOutcome",
    "ProjectCreator",
    "TemplateRenderer",
]
