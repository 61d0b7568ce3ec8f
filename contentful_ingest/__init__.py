"""Build-time ingestion of Contentful entries into a host's shared data."""

from .core.exceptions import (
    ContentfulError,
    FetchError,
    SaveError,
    TemplateError,
    TransformError,
    ValidationError,
)
from .core.models import BuildArtifact, ContentTypeSpec, TemplateSpec
from .core.plugin import ContentfulPlugin

__version__ = "1.0.0"

__all__ = [
    "BuildArtifact",
    "ContentTypeSpec",
    "ContentfulError",
    "ContentfulPlugin",
    "FetchError",
    "SaveError",
    "TemplateError",
    "TemplateSpec",
    "TransformError",
    "ValidationError",
]
