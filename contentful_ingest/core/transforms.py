"""Transform policies applied to every fetched entry.

A content type picks exactly one policy, resolved once from its
``transform`` option:

- omitted: :class:`DefaultTransform` flattens ``fields`` and ``sys``
- a callable: :class:`CustomTransform` hands the entry to user code
- ``False``: :class:`NoTransform` keeps the API shape
"""

import abc
from collections.abc import Callable
from typing import Any

import structlog

from .exceptions import TransformError
from .models import ContentTypeSpec, OutputEntry, RawEntry, TransformOption

logger = structlog.get_logger(__name__)


class Transform(abc.ABC):
    """Base class for transform policies."""

    @abc.abstractmethod
    def apply(self, entry: RawEntry) -> OutputEntry:
        """Convert one raw entry into its output shape."""


class DefaultTransform(Transform):
    """Flatten an entry so fields are addressable by name.

    Field values win over ``sys`` keys of the same name.
    """

    def apply(self, entry: RawEntry) -> dict[str, Any]:
        data = entry.to_dict()
        flattened = dict(data.get("fields", {}))
        for key, value in data["sys"].items():
            flattened.setdefault(key, value)
        return flattened


class NoTransform(Transform):
    """Return the entry as plain data with ``sys`` and ``fields`` nested."""

    def apply(self, entry: RawEntry) -> dict[str, Any]:
        return entry.to_dict()


class CustomTransform(Transform):
    """Run a user supplied function over each entry."""

    def __init__(self, func: Callable[[dict[str, Any]], OutputEntry]):
        self.func = func

    def apply(self, entry: RawEntry) -> OutputEntry:
        try:
            return self.func(entry.to_dict())
        except Exception as e:
            name = getattr(self.func, "__name__", repr(self.func))
            logger.error("Custom transform failed", transform=name, entry=entry.id, error=str(e))
            raise TransformError(f"Transform {name} failed for entry {entry.id}", cause=e) from e


def resolve_transform(option: TransformOption) -> Transform:
    """Pick the transform policy for a content type's ``transform`` option."""
    if option is None:
        return DefaultTransform()
    if option is False:
        return NoTransform()
    if callable(option):
        return CustomTransform(option)
    raise TypeError(f"Unsupported transform option: {option!r}")


def apply_transform(spec: ContentTypeSpec, entry: RawEntry) -> OutputEntry:
    """Apply ``spec``'s transform policy to a single entry."""
    try:
        return resolve_transform(spec.transform).apply(entry)
    except TransformError as e:
        e.content_type = e.content_type or spec.name
        raise
