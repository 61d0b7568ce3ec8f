"""Template rendering and artifact output."""

from .emitter import TemplateEmitter
from .templates import TemplateRenderer
from .writers import ArtifactWriter, FileSystemArtifactWriter, MemoryArtifactWriter

__all__ = [
    "ArtifactWriter",
    "FileSystemArtifactWriter",
    "MemoryArtifactWriter",
    "TemplateEmitter",
    "TemplateRenderer",
]
