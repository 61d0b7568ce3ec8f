"""Per content type pipeline: fetch every entry, then transform in order."""

from typing import Any, Protocol

import structlog

from .exceptions import ContentfulError
from .models import ContentTypeSpec, OutputEntry, RawEntry
from .transforms import resolve_transform

logger = structlog.get_logger(__name__)


class EntrySource(Protocol):
    """Anything able to return every raw entry for a content type."""

    async def fetch_all(
        self, space_id: str, access_token: str, type_id: str, filters: dict[str, Any] | None
    ) -> list[RawEntry]: ...


class ContentTypeProcessor:
    """Produces the finished entry list for one content type."""

    def __init__(self, source: EntrySource, space_id: str, access_token: str):
        """Initialize the processor.

        Args:
            source: Pager used to fetch raw entries
            space_id: Space the entries live in
            access_token: Delivery API token
        """
        self.source = source
        self.space_id = space_id
        self.access_token = access_token

    async def process(self, spec: ContentTypeSpec) -> list[OutputEntry]:
        """Fetch and transform all entries for ``spec``.

        Raises:
            FetchError: If any page fails
            TransformError: If a custom transform raises
        """
        transform = resolve_transform(spec.transform)
        log = logger.bind(content_type=spec.name, transform=type(transform).__name__)

        try:
            raw_entries = await self.source.fetch_all(
                self.space_id, self.access_token, spec.id, dict(spec.filters)
            )
            result = [transform.apply(entry) for entry in raw_entries]
        except ContentfulError as e:
            e.content_type = spec.name
            log.error("Content type failed", error=str(e))
            raise

        log.info("Content type processed", entries=len(result))
        return result
