"""
Domain models — re-exported for convenient access:

    from axum_app_create.core.models import ProjectConfig, TemplateSet, UpdateReport
"""

from axum_app_create.core.models.metadata import GenerationMetadata
from axum_app_create.core.models.project import (
    AuthConfig,
    DatabaseConfig,
    FeatureSet,
    LoggingConfig,
    ProjectConfig,
)
from axum_app_create.core.models.template import (
    InheritanceDirective,
    ResolvedTemplate,
    TemplateSet,
)
from axum_app_create.core.models.update import (
    ConflictChoice,
    FileClassification,
    UpdateReport,
)

__all__ = [
    # project.py
    "AuthConfig",
    # update.py
    "ConflictChoice",
    "DatabaseConfig",
    "FeatureSet",
    "FileClassification",
    # metadata.py
    "GenerationMetadata",
    # template.py
    "InheritanceDirective",
    "LoggingConfig",
    "ProjectConfig",
    "ResolvedTemplate",
    "TemplateSet",
    "UpdateReport",
]
