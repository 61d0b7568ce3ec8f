"""Paged retrieval of entries from the Content Delivery API."""

from typing import Any, Optional

import aiohttp
import structlog
from pydantic import ValidationError as PydanticValidationError

from ..constants import CONSTANTS
from ..core.config import ClientConfig
from ..core.config import config as default_config
from ..core.exceptions import FetchError
from ..core.models import RawEntry
from ..utils.http import auth_headers, get_json
from .links import build_index, resolve_entry

logger = structlog.get_logger(__name__)

PAGING_KEYS = ("skip", "limit")


class ContentfulPager:
    """Fetches every entry of a content type, one page at a time."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        config: Optional[ClientConfig] = None,
        include_level: Optional[int] = None,
        resolve_links: bool = True,
    ):
        """Initialize the pager.

        Args:
            session: aiohttp session used for every page request
            config: Client settings (defaults to the global config)
            include_level: Depth of linked records the API should include
            resolve_links: Replace link objects with included records
        """
        self.session = session
        self.config = config or default_config
        self.include_level = include_level
        self.resolve_links = resolve_links

    async def fetch_page(
        self, space_id: str, access_token: str, query: dict[str, Any]
    ) -> dict[str, Any]:
        """Fetch one raw page (``items``, ``total``, ``includes``)."""
        return await get_json(
            self.session,
            self.config.entries_url(space_id),
            params=query,
            headers=auth_headers(access_token),
            timeout=self.config.default_timeout,
        )

    async def fetch_all(
        self,
        space_id: str,
        access_token: str,
        type_id: str,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[RawEntry]:
        """Fetch all entries of ``type_id`` in remote order.

        Caller filters are merged over the default query. A caller ``skip``
        sets the starting offset and a caller ``limit`` caps how many entries
        are collected; otherwise paging continues until the API runs out.

        Raises:
            FetchError: If any page request fails or returns malformed data
        """
        filters = dict(filters or {})
        requested_limit = _positive_int(filters.get("limit"), "limit", type_id)
        start = _positive_int(filters.get("skip"), "skip", type_id, allow_zero=True) or 0
        page_size = (
            min(requested_limit, CONSTANTS.MAX_PAGE_SIZE)
            if requested_limit
            else self.config.page_size
        )
        base_query: dict[str, Any] = {"content_type": type_id}
        if self.include_level is not None:
            base_query["include"] = self.include_level
        base_query.update({k: v for k, v in filters.items() if k not in PAGING_KEYS})

        entries: list[RawEntry] = []
        while True:
            limit = page_size
            if requested_limit:
                limit = min(page_size, requested_limit - len(entries))
            query = {**base_query, "skip": start + len(entries), "limit": limit}

            try:
                page = await self.fetch_page(space_id, access_token, query)
            except FetchError as e:
                e.content_type = e.content_type or type_id
                raise

            items = page.get("items") or []
            total = page.get("total")
            entries.extend(self._parse_items(items, page.get("includes") or {}, type_id))

            logger.debug(
                "Fetched page",
                content_type=type_id,
                skip=query["skip"],
                received=len(items),
                total=total,
            )

            if len(items) < limit:
                break
            if isinstance(total, int) and start + len(entries) >= total:
                break
            if requested_limit and len(entries) >= requested_limit:
                break

        logger.info("Fetched all entries", content_type=type_id, count=len(entries))
        return entries

    def _parse_items(
        self, items: list[Any], includes: dict[str, Any], type_id: str
    ) -> list[RawEntry]:
        """Validate raw page items, resolving links first when enabled."""
        index = build_index(items, includes) if self.resolve_links else {}
        parsed = []
        for item in items:
            if self.resolve_links and isinstance(item, dict):
                item = resolve_entry(item, index)
            try:
                parsed.append(RawEntry.model_validate(item))
            except PydanticValidationError as e:
                raise FetchError(
                    "Malformed entry in API response", content_type=type_id, cause=e
                ) from e
        return parsed


def _positive_int(
    value: Any, name: str, type_id: str, allow_zero: bool = False
) -> Optional[int]:
    if value is None:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise FetchError(
            f'Filter "{name}" must be an integer', content_type=type_id, cause=e
        ) from e
    if number < 0 or (number == 0 and not allow_zero):
        raise FetchError(f'Filter "{name}" is out of range: {number}', content_type=type_id)
    return number
