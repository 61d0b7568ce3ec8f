"""Jinja2 template loading and rendering for per-entry output files."""

from pathlib import Path
from typing import Any, Optional

import structlog
from aiofiles import open as aopen
from jinja2 import Environment, Template, TemplateSyntaxError, select_autoescape

from ..constants import CONSTANTS
from ..core.exceptions import TemplateError

logger = structlog.get_logger(__name__)


class TemplateRenderer:
    """Reads template files relative to a root directory and renders them.

    Compiled templates are kept per path for the lifetime of the renderer,
    which the plugin creates once per run.
    """

    def __init__(self, template_root: Path, env: Optional[Environment] = None):
        """Initialize the renderer.

        Args:
            template_root: Directory template paths are resolved against
            env: Jinja2 environment (a default HTML-escaping one if None)
        """
        self.template_root = Path(template_root)
        self.env = env or Environment(
            autoescape=select_autoescape(default_for_string=True),
            keep_trailing_newline=True,
        )
        self._compiled: dict[Path, Template] = {}

    def resolve(self, template_path: str) -> Path:
        """Absolute location of ``template_path``."""
        return (self.template_root / template_path).resolve()

    async def load(self, template_path: str) -> Template:
        """Read and compile a template file, reusing an earlier compile.

        Raises:
            TemplateError: If the file is missing or has a syntax error
        """
        location = self.resolve(template_path)
        if location in self._compiled:
            return self._compiled[location]

        try:
            async with aopen(location, "r", encoding=CONSTANTS.DEFAULT_ENCODING) as f:
                source = await f.read()
        except OSError as e:
            raise TemplateError(
                f"Template file could not be read: {location}", template=template_path, cause=e
            ) from e

        try:
            template = self.env.from_string(source)
        except TemplateSyntaxError as e:
            raise TemplateError(
                f"Template syntax error on line {e.lineno}", template=template_path, cause=e
            ) from e

        logger.debug("Compiled template", template=str(location))
        self._compiled[location] = template
        return template

    async def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render ``template_path`` with ``context`` bound as variables.

        Raises:
            TemplateError: If loading or rendering fails
        """
        template = await self.load(template_path)
        try:
            return template.render(**context)
        except Exception as e:
            raise TemplateError(
                f"Template rendering failed: {e}", template=template_path, cause=e
            ) from e
