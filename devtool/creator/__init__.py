"""Project and component creation workflows.

Key classes:
    ProjectCreator    - New application from a cached template repository
    ComponentCreator  - New component package from the bundled skeleton
"""

from .base import BaseCreator
from .component import ComponentCreationState, ComponentCreator, FileManifestEntry, component_manifest
from .project import ProjectCreationState, ProjectCreator, RepositorySource, SourceKind, resolve_source

__all__ = [
    "BaseCreator",
    # Project
    "ProjectCreator",
    "ProjectCreationState",
    "RepositorySource",
    "SourceKind",
    "resolve_source",
    # Component
    "ComponentCreator",
    "ComponentCreationState",
    "FileManifestEntry",
    "component_manifest",
]
