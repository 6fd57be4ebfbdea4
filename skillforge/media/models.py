"""Media artifacts submitted for analysis."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path

from skillforge.constants import ACCEPTED_MIME_PREFIXES, ACCEPTED_MIME_TYPES
from skillforge.errors import UnsupportedMediaError


@dataclass(frozen=True)
class MediaArtifact:
    data: bytes = field(repr=False)
    mime_type: str
    source_name: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def base_mime_type(self) -> str:
        """MIME type without parameters (``video/webm; codecs=vp9`` -> ``video/webm``)."""
        return self.mime_type.split(";", 1)[0].strip().lower()


def is_accepted_mime_type(mime_type: str) -> bool:
    base = mime_type.split(";", 1)[0].strip().lower()
    return base in ACCEPTED_MIME_TYPES or base.startswith(ACCEPTED_MIME_PREFIXES)


def guess_mime_type(path: Path) -> str | None:
    mime_type, _ = mimetypes.guess_type(path.name)
    if mime_type is None and path.suffix.lower() == ".webm":
        return "video/webm"
    return mime_type


def check_artifact(artifact: MediaArtifact, max_bytes: int | None = None) -> MediaArtifact:
    if not is_accepted_mime_type(artifact.mime_type):
        raise UnsupportedMediaError(
            f"Unsupported media type {artifact.mime_type!r}; "
            "expected video/*, image/* or application/pdf"
        )
    if artifact.size == 0:
        raise UnsupportedMediaError("Media is empty")
    if max_bytes is not None and artifact.size > max_bytes:
        raise UnsupportedMediaError(
            f"Media is {artifact.size} bytes, above the {max_bytes} byte limit"
        )
    return artifact


def load_media_file(
    path: Path, mime_type: str | None = None, max_bytes: int | None = None
) -> MediaArtifact:
    if not path.is_file():
        raise UnsupportedMediaError(f"Not a file: {path}")
    resolved_type = mime_type or guess_mime_type(path)
    if resolved_type is None:
        raise UnsupportedMediaError(f"Cannot determine media type of {path.name}")
    if max_bytes is not None and path.stat().st_size > max_bytes:
        raise UnsupportedMediaError(
            f"Media is {path.stat().st_size} bytes, above the {max_bytes} byte limit"
        )
    artifact = MediaArtifact(
        data=path.read_bytes(), mime_type=resolved_type, source_name=path.name
    )
    return check_artifact(artifact, max_bytes=max_bytes)
