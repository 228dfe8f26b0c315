"""Single-class code generation from ``.stub`` templates.

Key classes:
    TemplateRenderer  - Jinja2 stub rendering with the include_file directive
    ArtifactSpec      - Default suffix/namespace/template/output dir of a kind
    CodeGenerator     - One generation request, from type key to written file
"""

from .generator import (
    CodeGenerator,
    GenerationContext,
    GenerationOptions,
    GenerationOutcome,
    SessionState,
    class_name,
)
from .registry import ArtifactProfile, ArtifactSpec, ArtifactType, lookup, registered_types
from .templates import TemplateRenderer

__all__ = [
    # Rendering
    "TemplateRenderer",
    # Registry
    "ArtifactType",
    "ArtifactSpec",
    "ArtifactProfile",
    "lookup",
    "registered_types",
    # Generation session
    "CodeGenerator",
    "GenerationContext",
    "GenerationOptions",
    "GenerationOutcome",
    "SessionState",
    "class_name",
]
