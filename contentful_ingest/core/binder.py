"""Binding of finished results into the host's shared build data."""

from collections.abc import MutableMapping
from typing import Any

import structlog

from ..constants import CONSTANTS
from .models import OutputEntry

logger = structlog.get_logger(__name__)


def bind(add_data_to: MutableMapping[str, Any], name: str, result: list[OutputEntry]) -> None:
    """Store ``result`` under ``add_data_to["contentful"][name]``.

    The namespace is created on first use; an existing value for ``name`` is
    replaced.
    """
    namespace = add_data_to.get(CONSTANTS.DATA_KEY)
    if namespace is None:
        namespace = add_data_to[CONSTANTS.DATA_KEY] = {}
    namespace[name] = result
    logger.debug("Bound content type", name=name, entries=len(result))


class DataStoreBinder:
    """Output channel writing results into one shared data mapping."""

    def __init__(self, store: MutableMapping[str, Any]):
        self.store = store

    def bind(self, name: str, result: list[OutputEntry]) -> None:
        bind(self.store, name, result)

    @property
    def data(self) -> dict[str, list[OutputEntry]]:
        """Everything bound so far, keyed by content type name."""
        return self.store.get(CONSTANTS.DATA_KEY) or {}
