"""Fan-out of transformed entries into templated output files."""

from collections.abc import Mapping
from pathlib import PurePosixPath
from typing import Any, Optional

import structlog

from ..constants import CONSTANTS
from ..core.exceptions import ContentfulError, TemplateError
from ..core.models import BuildArtifact, ContentTypeSpec, OutputEntry
from .templates import TemplateRenderer
from .writers import ArtifactWriter

logger = structlog.get_logger(__name__)


class TemplateEmitter:
    """Renders each entry of a templated content type into its own artifact."""

    def __init__(
        self,
        renderer: TemplateRenderer,
        writer: ArtifactWriter,
        globals_: Optional[Mapping[str, Any]] = None,
    ):
        """Initialize the emitter.

        Args:
            renderer: Template renderer for this run
            writer: Host file writer receiving the artifacts
            globals_: Extra variables visible to every template (the shared
                build data)
        """
        self.renderer = renderer
        self.writer = writer
        self.globals = globals_ if globals_ is not None else {}

    async def emit(self, spec: ContentTypeSpec, result: list[OutputEntry]) -> list[str]:
        """Render and register one artifact per entry, in order.

        Returns:
            Output paths in the order they were registered

        Raises:
            TemplateError: On the first entry that cannot be rendered; earlier
                artifacts stay registered
        """
        if spec.template is None:
            return []

        paths = []
        for index, entry in enumerate(result):
            try:
                output_path = self._output_path(spec, entry)
                context = {**self.globals, CONSTANTS.TEMPLATE_ITEM_NAME: entry}
                rendered = await self.renderer.render(spec.template.path, context)
                await self.writer.register(
                    BuildArtifact(
                        path=output_path, contents=rendered.encode(CONSTANTS.DEFAULT_ENCODING)
                    )
                )
            except ContentfulError as e:
                e.content_type = spec.name
                logger.error(
                    "Template emission failed", content_type=spec.name, index=index, error=str(e)
                )
                raise

            paths.append(output_path)

        logger.info("Emitted templates", content_type=spec.name, files=len(paths))
        return paths

    def _output_path(self, spec: ContentTypeSpec, entry: OutputEntry) -> str:
        try:
            output_path = spec.template.output_path(entry)
        except Exception as e:
            raise TemplateError(
                "Output path could not be computed", template=spec.template.path, cause=e
            ) from e

        if not isinstance(output_path, str) or not output_path.strip():
            raise TemplateError(
                f"Output path must be a non-empty string, got {output_path!r}",
                template=spec.template.path,
            )
        if PurePosixPath(output_path).is_absolute():
            raise TemplateError(
                f"Output path must be relative: {output_path}", template=spec.template.path
            )
        return output_path
