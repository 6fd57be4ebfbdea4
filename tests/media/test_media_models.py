from pathlib import Path

import pytest

from skillforge.errors import UnsupportedMediaError
from skillforge.media.models import (
    MediaArtifact,
    check_artifact,
    guess_mime_type,
    is_accepted_mime_type,
    load_media_file,
)


@pytest.mark.parametrize(
    "mime_type",
    ["video/webm", "video/mp4", "image/png", "application/pdf", "video/webm; codecs=vp9"],
)
def test_accepted_mime_types(mime_type: str) -> None:
    assert is_accepted_mime_type(mime_type)


@pytest.mark.parametrize("mime_type", ["text/plain", "application/zip", "audio/ogg"])
def test_rejected_mime_types(mime_type: str) -> None:
    assert not is_accepted_mime_type(mime_type)


def test_base_mime_type_drops_parameters() -> None:
    artifact = MediaArtifact(b"x", "Video/WebM; codecs=vp9")
    assert artifact.base_mime_type == "video/webm"
    assert artifact.size == 1


def test_artifact_repr_hides_bytes() -> None:
    assert "secret-bytes" not in repr(MediaArtifact(b"secret-bytes", "image/png"))


def test_check_artifact_rejects_empty_media() -> None:
    with pytest.raises(UnsupportedMediaError, match="empty"):
        check_artifact(MediaArtifact(b"", "video/webm"))


def test_check_artifact_rejects_oversized_media() -> None:
    with pytest.raises(UnsupportedMediaError, match="limit"):
        check_artifact(MediaArtifact(b"12345", "video/webm"), max_bytes=4)


def test_check_artifact_rejects_unsupported_type() -> None:
    with pytest.raises(UnsupportedMediaError, match="text/plain"):
        check_artifact(MediaArtifact(b"hello", "text/plain"))


def test_guess_mime_type(tmp_path: Path) -> None:
    assert guess_mime_type(tmp_path / "demo.webm") == "video/webm"
    assert guess_mime_type(tmp_path / "shot.png") == "image/png"
    assert guess_mime_type(tmp_path / "manual.pdf") == "application/pdf"


def test_load_media_file(tmp_path: Path) -> None:
    path = tmp_path / "shot.png"
    path.write_bytes(b"\x89PNG")

    artifact = load_media_file(path)

    assert artifact.mime_type == "image/png"
    assert artifact.data == b"\x89PNG"
    assert artifact.source_name == "shot.png"


def test_load_media_file_with_explicit_type(tmp_path: Path) -> None:
    path = tmp_path / "capture.bin"
    path.write_bytes(b"data")
    assert load_media_file(path, mime_type="video/mp4").mime_type == "video/mp4"


def test_load_media_file_rejects_unknown_extension(tmp_path: Path) -> None:
    path = tmp_path / "notes.unknownext"
    path.write_bytes(b"data")
    with pytest.raises(UnsupportedMediaError, match="Cannot determine"):
        load_media_file(path)


def test_load_media_file_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(UnsupportedMediaError, match="Not a file"):
        load_media_file(tmp_path / "missing.webm")
