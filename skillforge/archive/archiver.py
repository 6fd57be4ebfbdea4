"""Deterministic zip packaging of skill packages.

Layout::

    <slug>/SKILL.md
    <slug>/scripts/<filename>
    <slug>/references/<filename>
    <slug>/assets/<filename>

Entries carry a fixed timestamp and fixed permissions so packing the same
package twice yields identical bytes.
"""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

from skillforge.constants import ARCHIVE_SUFFIX, SKILL_FILENAME
from skillforge.errors import SchemaViolationError
from skillforge.skills.document import parse_skill_document, render_skill_document
from skillforge.skills.models import (
    RESOURCE_DIRNAMES,
    ResourceType,
    SkillFile,
    SkillPackage,
)
from skillforge.skills.schema import validate_package

ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
_FILE_MODE = 0o644 << 16
_DIR_MODE = (0o755 << 16) | 0x10
_RESOURCE_ORDER = (ResourceType.SCRIPT, ResourceType.REFERENCE, ResourceType.ASSET)
_TYPES_BY_DIRNAME = {dirname: kind for kind, dirname in RESOURCE_DIRNAMES.items()}


def archive_filename(package: SkillPackage) -> str:
    return f"{package.slug}{ARCHIVE_SUFFIX}"


def archive_entries(package: SkillPackage) -> list[tuple[str, str]]:
    """(path, text) pairs in write order; directories are implied."""
    root = package.slug
    entries = [(f"{root}/{SKILL_FILENAME}", render_skill_document(package))]
    for resource_type in _RESOURCE_ORDER:
        for item in package.resources_of(resource_type):
            entries.append((f"{root}/{item.path}", item.content))
    return entries


def _directories(paths: list[str]) -> list[str]:
    seen: list[str] = []
    for path in paths:
        parts = path.split("/")[:-1]
        for depth in range(1, len(parts) + 1):
            directory = "/".join(parts[:depth]) + "/"
            if directory not in seen:
                seen.append(directory)
    return seen


def _write_entry(zf: zipfile.ZipFile, name: str, data: bytes, mode: int) -> None:
    info = zipfile.ZipInfo(name, date_time=ZIP_EPOCH)
    info.external_attr = mode
    info.create_system = 3
    info.compress_type = zipfile.ZIP_STORED if name.endswith("/") else zipfile.ZIP_DEFLATED
    zf.writestr(info, data)


def pack(package: SkillPackage) -> bytes:
    validate_package(package)
    entries = archive_entries(package)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for directory in _directories([path for path, _ in entries]):
            _write_entry(zf, directory, b"", _DIR_MODE)
        for path, text in entries:
            _write_entry(zf, path, text.encode("utf-8"), _FILE_MODE)
    return buffer.getvalue()


def unpack(data: bytes) -> SkillPackage:
    """Rebuild a package from an archive produced by ``pack``.

    Resource order follows the archive, so language tags are not recovered.
    """
    try:
        zf = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise SchemaViolationError(f"not a zip archive ({exc})") from exc

    with zf:
        names = [name for name in zf.namelist() if not name.endswith("/")]
        roots = {name.split("/", 1)[0] for name in names}
        if len(roots) != 1:
            raise SchemaViolationError("archive must contain exactly one top-level folder")
        slug = roots.pop()

        document_name = f"{slug}/{SKILL_FILENAME}"
        if document_name not in names:
            raise SchemaViolationError(f"archive has no {document_name}")
        frontmatter, body = parse_skill_document(zf.read(document_name).decode("utf-8"))

        resources: list[SkillFile] = []
        for name in names:
            if name == document_name:
                continue
            relative = name[len(slug) + 1 :]
            dirname, _, filename = relative.partition("/")
            resource_type = _TYPES_BY_DIRNAME.get(dirname)
            if resource_type is None or not filename:
                raise SchemaViolationError(f"unexpected archive entry {name}")
            resources.append(
                SkillFile(
                    filename=filename,
                    content=zf.read(name).decode("utf-8"),
                    type=resource_type,
                )
            )

    package = SkillPackage(
        slug=slug, frontmatter=frontmatter, body=body, resources=tuple(resources)
    )
    validate_package(package)
    return package


def write_archive(package: SkillPackage, directory: Path) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / archive_filename(package)
    path.write_bytes(pack(package))
    return path
