from skillforge.archive.archiver import (
    archive_entries,
    archive_filename,
    pack,
    unpack,
    write_archive,
)

__all__ = ["archive_entries", "archive_filename", "pack", "unpack", "write_archive"]
