# WORKFLOW: In-memory ZIP handling for catalog uploads and downloads.
# Used by: Import pipeline (extraction), export pipeline (archive building)
# Functions:
# 1. open_tabular_entry() - Open the first CSV entry of an uploaded ZIP
# 2. build_archive() - Wrap a single payload as a new ZIP archive
#
# Extraction flow: upload bytes -> ZipFile -> first *.csv entry -> text stream
# Everything stays in memory; buffers are released when the context exits.

"""
ZIP archive extraction and building for catalog files.
"""

import io
import logging
import zipfile
import zlib
from contextlib import contextmanager
from typing import Iterator, TextIO

from core.exceptions import CorruptArchive, NoTabularFileFound

logger = logging.getLogger(__name__)


@contextmanager
def open_tabular_entry(payload: bytes, suffix: str = ".csv") -> Iterator[TextIO]:
    """
    Open the first tabular entry of a ZIP archive held in memory.

    Directory entries are skipped and the suffix match is case-insensitive.

    Args:
        payload: Raw bytes of the uploaded archive
        suffix: File name suffix identifying the tabular entry

    Yields:
        Text stream over the decompressed entry (UTF-8, BOM tolerated)

    Raises:
        CorruptArchive: If the payload is not a readable ZIP archive
        NoTabularFileFound: If no entry carries the suffix
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(payload))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as e:
        logger.error(f"Failed to open ZIP archive: {e}")
        raise CorruptArchive(f"Failed to open ZIP file: {e}") from e

    with archive:
        entry = _find_entry(archive, suffix)
        if entry is None:
            logger.error(f"No {suffix} file found in archive")
            raise NoTabularFileFound(f"No {suffix} file found in archive")

        logger.info(f"Found tabular file inside ZIP: {entry.filename}")

        try:
            raw = archive.read(entry)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError) as e:
            logger.error(f"Failed to decompress {entry.filename}: {e}")
            raise CorruptArchive(f"Failed to read {entry.filename}: {e}") from e

    stream = io.TextIOWrapper(io.BytesIO(raw), encoding="utf-8-sig", newline="")
    try:
        yield stream
    finally:
        stream.close()


def _find_entry(archive: zipfile.ZipFile, suffix: str):
    suffix = suffix.lower()
    for info in archive.infolist():
        if info.is_dir():
            continue
        if info.filename.lower().endswith(suffix):
            return info
    return None


def build_archive(entry_name: str, payload: bytes) -> bytes:
    """
    Build a deflate-compressed ZIP holding exactly one entry.

    Args:
        entry_name: Name of the entry inside the archive
        payload: Entry contents

    Returns:
        Bytes of the finished archive
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(entry_name, payload)

    logger.info(f"ZIP archive created in memory ({buffer.getbuffer().nbytes} bytes)")
    return buffer.getvalue()
