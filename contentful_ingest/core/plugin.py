"""Build plugin that pulls Contentful entries into the host's shared data."""

import asyncio
import json
from collections.abc import Callable, Iterable, Mapping, MutableMapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Optional, Union

import aiohttp
import structlog
from pydantic import ValidationError as PydanticValidationError

from ..client.pager import ContentfulPager
from ..constants import CONSTANTS
from ..rendering.emitter import TemplateEmitter
from ..rendering.templates import TemplateRenderer
from ..rendering.writers import ArtifactWriter, MemoryArtifactWriter
from .binder import DataStoreBinder
from .config import ClientConfig
from .config import config as default_config
from .exceptions import ContentfulError, ValidationError
from .models import BuildArtifact, ContentTypeSpec, OutputEntry, PluginConfig
from .processor import ContentTypeProcessor, EntrySource

logger = structlog.get_logger(__name__)

ContentTypeOption = Union[ContentTypeSpec, Mapping[str, Any]]
DoneCallback = Callable[..., Any]


class ContentfulPlugin:
    """Fetches configured content types on every build run.

    Results land in ``add_data_to["contentful"][name]``. Content types with a
    template also produce one artifact per entry through the artifact writer.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        space_id: Optional[str] = None,
        add_data_to: Optional[MutableMapping[str, Any]] = None,
        content_types: Optional[Iterable[ContentTypeOption]] = None,
        json_path: Optional[str] = None,
        include_level: Optional[int] = None,
        template_root: Union[str, Path, None] = None,
        client_config: Optional[ClientConfig] = None,
        artifact_writer: Optional[ArtifactWriter] = None,
        pager: Optional[EntrySource] = None,
    ):
        """Validate options and set up the plugin.

        Args:
            access_token: Delivery (or preview) API token
            space_id: Space to read from
            add_data_to: Shared build data mapping the results are bound into
            content_types: Content type descriptors (dicts or ContentTypeSpec)
            json_path: Write every bound content type to this JSON artifact
            include_level: How many levels of linked records to include
            template_root: Directory template paths are relative to
            client_config: API client settings (defaults to the global config)
            artifact_writer: Host file writer (in-memory if None)
            pager: Entry source to use instead of the HTTP pager

        Raises:
            ValidationError: If a required option is missing or a content
                type descriptor is invalid
        """
        _require("access_token", access_token)
        _require("space_id", space_id)
        if add_data_to is None:
            _missing("add_data_to")

        self.config = PluginConfig(
            access_token=access_token,
            space_id=space_id,
            add_data_to=add_data_to,
            content_types=_validate_content_types(content_types),
            json_path=json_path,
            include_level=_validate_include_level(include_level),
            template_root=Path(template_root) if template_root else Path.cwd(),
        )
        self.client_config = client_config or default_config
        self.artifact_writer = (
            artifact_writer if artifact_writer is not None else MemoryArtifactWriter()
        )
        self.pager = pager

        logger.info(
            "Initialized Contentful plugin",
            space_id=space_id,
            content_types=[spec.name for spec in self.config.content_types],
        )

    @property
    def content_types(self) -> list[ContentTypeSpec]:
        return self.config.content_types

    def run(self, build_context: Any, previous_output: Any, done: DoneCallback):
        """Host hook: fetch everything, then call ``done()`` or ``done(error)``.

        Outside an event loop this blocks until the run completes. Inside a
        running loop the work is scheduled and the task is returned.
        """
        coro = self._run_and_notify(build_context, done)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return None
        return loop.create_task(coro)

    async def _run_and_notify(self, build_context: Any, done: DoneCallback) -> None:
        try:
            await self.run_async(build_context)
        except Exception as e:  # pylint: disable=broad-exception-caught
            error = e
            if not isinstance(e, ContentfulError):
                error = ContentfulError(f"Run failed: {e}", cause=e)
            logger.error("Contentful run failed", error=str(error))
            done(error)
            return
        done()

    async def run_async(self, build_context: Any = None) -> dict[str, list[OutputEntry]]:
        """Process every content type and return results keyed by name.

        All content types are driven concurrently. The first failure is raised
        only after every content type has settled.

        Raises:
            ContentfulError: The first error any content type produced
        """
        specs = self.config.content_types
        logger.info("Starting Contentful run", content_types=len(specs))

        binder = DataStoreBinder(self.config.add_data_to)
        renderer = TemplateRenderer(self.config.template_root)
        emitter = TemplateEmitter(renderer, self.artifact_writer, globals_=self.config.add_data_to)
        semaphore = asyncio.Semaphore(self.client_config.max_concurrent)

        async with self._entry_source() as source:
            processor = ContentTypeProcessor(source, self.config.space_id, self.config.access_token)
            tasks = [
                asyncio.ensure_future(
                    self._run_content_type(spec, processor, binder, emitter, semaphore)
                )
                for spec in specs
            ]
            first_error = await _settle(tasks)

        if first_error is not None:
            raise first_error

        results = {spec.name: task.result() for spec, task in zip(specs, tasks)}
        if self.config.json_path:
            await self._write_json(self.config.json_path, binder.data)

        logger.info(
            "Contentful run completed",
            entries={name: len(result) for name, result in results.items()},
        )
        return results

    async def _run_content_type(
        self,
        spec: ContentTypeSpec,
        processor: ContentTypeProcessor,
        binder: DataStoreBinder,
        emitter: TemplateEmitter,
        semaphore: asyncio.Semaphore,
    ) -> list[OutputEntry]:
        try:
            async with semaphore:
                result = await processor.process(spec)
            binder.bind(spec.name, result)
            if spec.template is not None:
                await emitter.emit(spec, result)
            if spec.json_path:
                await self._write_json(spec.json_path, result)
            return result
        except ContentfulError:
            raise
        except Exception as e:
            logger.exception("Unexpected error processing content type", content_type=spec.name)
            raise ContentfulError(
                f"Processing failed: {e}", content_type=spec.name, cause=e
            ) from e

    @asynccontextmanager
    async def _entry_source(self):
        """Yield the injected pager, or an HTTP pager bound to a fresh session."""
        if self.pager is not None:
            yield self.pager
            return

        timeout = aiohttp.ClientTimeout(total=self.client_config.default_timeout)
        async with aiohttp.ClientSession(
            timeout=timeout, headers={"User-Agent": self.client_config.user_agent}
        ) as session:
            yield ContentfulPager(
                session, config=self.client_config, include_level=self.config.include_level
            )

    async def _write_json(self, path: str, data: Any) -> None:
        contents = json.dumps(data, indent=CONSTANTS.JSON_INDENT, ensure_ascii=False, default=str)
        await self.artifact_writer.register(
            BuildArtifact(path=path, contents=contents.encode(CONSTANTS.DEFAULT_ENCODING))
        )
        logger.debug("Wrote JSON artifact", path=path)


async def _settle(tasks: list[asyncio.Future]) -> Optional[ContentfulError]:
    """Wait for every task; return the error that happened first, if any."""
    first_error = None
    for future in asyncio.as_completed(tasks):
        try:
            await future
        except ContentfulError as e:
            if first_error is None:
                first_error = e
    return first_error


def _missing(option: str):
    raise ValidationError(f'{CONSTANTS.VALIDATION_PREFIX} option "{option}" is required')


def _require(option: str, value: Any) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        _missing(option)


def _validate_content_types(
    content_types: Optional[Iterable[ContentTypeOption]],
) -> list[ContentTypeSpec]:
    specs = []
    for index, item in enumerate(content_types or []):
        if isinstance(item, ContentTypeSpec):
            specs.append(item)
            continue
        if not isinstance(item, Mapping):
            raise ValidationError(
                f"{CONSTANTS.VALIDATION_PREFIX} content type at index {index} must be a mapping"
            )
        try:
            specs.append(ContentTypeSpec.model_validate(dict(item)))
        except PydanticValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ValidationError(
                f"{CONSTANTS.VALIDATION_PREFIX} invalid content type at index {index}: {details}",
                cause=e,
            ) from e
    return specs


def _validate_include_level(include_level: Optional[int]) -> Optional[int]:
    if include_level is None:
        return None
    if not isinstance(include_level, int) or not 0 <= include_level <= CONSTANTS.MAX_INCLUDE_LEVEL:
        raise ValidationError(
            f'{CONSTANTS.VALIDATION_PREFIX} option "include_level" must be between 0 and '
            f"{CONSTANTS.MAX_INCLUDE_LEVEL}"
        )
    return include_level
