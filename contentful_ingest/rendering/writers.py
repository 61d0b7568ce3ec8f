"""Artifact writers: where rendered output files are registered."""

from pathlib import Path
from typing import Protocol

import structlog
from aiofiles import open as aopen

from ..core.exceptions import SaveError
from ..core.models import BuildArtifact

logger = structlog.get_logger(__name__)


class ArtifactWriter(Protocol):
    """The host's output-file mechanism."""

    async def register(self, artifact: BuildArtifact) -> None: ...


class MemoryArtifactWriter:
    """Keeps artifacts in memory, keyed by path; a later write replaces an earlier one."""

    def __init__(self):
        self.artifacts: dict[str, BuildArtifact] = {}

    async def register(self, artifact: BuildArtifact) -> None:
        if artifact.path in self.artifacts:
            logger.warning("Artifact path written twice", path=artifact.path)
        self.artifacts[artifact.path] = artifact

    def __getitem__(self, path: str) -> BuildArtifact:
        return self.artifacts[path]

    def __contains__(self, path: object) -> bool:
        return path in self.artifacts

    def __len__(self) -> int:
        return len(self.artifacts)


class FileSystemArtifactWriter:
    """Writes artifacts below an output directory."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.written: list[Path] = []

    def target(self, artifact: BuildArtifact) -> Path:
        """Resolve where ``artifact`` goes, refusing paths outside the output dir."""
        root = self.output_dir.resolve()
        target = (root / artifact.path).resolve()
        if not target.is_relative_to(root):
            raise SaveError(f"Artifact path escapes the output directory: {artifact.path}")
        return target

    async def register(self, artifact: BuildArtifact) -> None:
        target = self.target(artifact)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            async with aopen(target, "wb") as f:
                await f.write(artifact.contents)
        except OSError as e:
            raise SaveError(f"Failed to write {target}: {e}", cause=e) from e

        self.written.append(target)
        logger.debug("Wrote artifact", path=str(target), size=len(artifact.contents))
