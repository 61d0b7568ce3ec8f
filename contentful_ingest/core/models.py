"""Data models shared across the ingestion pipeline.

Remote entries and user supplied content type descriptors are validated with
pydantic at the boundary; plain dataclasses carry the internal values.
"""

import copy
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

OutputEntry = Any
OutputPath = Union[str, Callable[[OutputEntry], str]]
TransformOption = Union[Literal[False], Callable[[dict[str, Any]], OutputEntry], None]


class EntrySys(BaseModel):
    """System metadata attached to every remote record."""

    model_config = ConfigDict(extra="allow")

    id: str
    type: str = "Entry"


class RawEntry(BaseModel):
    """One entry as returned by the Content Delivery API."""

    model_config = ConfigDict(extra="allow")

    sys: EntrySys
    fields: dict[str, Any] = Field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.sys.id

    def to_dict(self) -> dict[str, Any]:
        """Return a fresh plain-data copy of the entry.

        Only keys present in the remote record are included.
        """
        return copy.deepcopy(self.model_dump(exclude_unset=True))


class TemplateSpec(BaseModel):
    """Template settings for a content type.

    ``output`` is either a callable receiving the transformed entry or a
    ``str.format`` pattern such as ``"posts/{title}.html"``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    path: str = Field(min_length=1, description="Template file, relative to the template root")
    output: OutputPath = Field(description="Output path callable or format pattern")

    @field_validator("output")
    @classmethod
    def validate_output(cls, value: OutputPath) -> OutputPath:
        if isinstance(value, str) and not value.strip():
            raise ValueError("output pattern cannot be empty")
        return value

    def output_path(self, entry: OutputEntry) -> str:
        """Compute the output path for one transformed entry."""
        if callable(self.output):
            return self.output(entry)
        if isinstance(entry, dict):
            return self.output.format(**entry)
        return self.output.format(item=entry)


class ContentTypeSpec(BaseModel):
    """Descriptor for one content type to ingest."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, populate_by_name=True)

    name: str = Field(min_length=1, description="Key used under the shared data mapping")
    id: str = Field(min_length=1, description="Remote content type identifier")
    filters: dict[str, Any] = Field(default_factory=dict, description="Extra query parameters")
    transform: TransformOption = Field(default=None, description="Transform policy")
    template: Optional[TemplateSpec] = Field(default=None, description="Per-entry template")
    json_path: Optional[str] = Field(
        default=None, alias="json", description="Write this type's entries to a JSON file"
    )

    @field_validator("transform", mode="before")
    @classmethod
    def validate_transform(cls, value: Any) -> Any:
        if value is None or value is False or callable(value):
            return value
        raise ValueError("transform must be a callable, False, or omitted")


@dataclass
class BuildArtifact:
    """A virtual output file produced for the host's file writer."""

    path: str
    contents: bytes

    @property
    def text(self) -> str:
        return self.contents.decode("utf-8")


@dataclass
class PluginConfig:
    """Validated construction options for the plugin."""

    access_token: str
    space_id: str
    add_data_to: MutableMapping[str, Any]
    content_types: list[ContentTypeSpec] = field(default_factory=list)
    json_path: Optional[str] = None
    include_level: Optional[int] = None
    template_root: Path = field(default_factory=Path.cwd)
