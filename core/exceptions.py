# WORKFLOW: Error taxonomy for the catalog import/export pipelines.
# Used by: ETL components, catalog store, pipelines, API error handlers
# Errors include:
# 1. CorruptArchive / NoTabularFileFound - archive extraction failures
# 2. MalformedTable - CSV tokenization failures
# 3. ImportRejected - the whole upload could not be processed (HTTP 400)
# 4. StoreUnavailable - database connectivity or fatal query failure (HTTP 500)
# 5. ExportFailed - store read or serialization failure during export (HTTP 500)
#
# Leaf errors are translated into ImportRejected by the import pipeline.
# Per-row problems are never raised; they are logged as row rejections.

"""
Exceptions raised by the catalog pipelines.
"""

from fastapi import status


class CatalogError(Exception):
    """Base exception for catalog errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CorruptArchive(CatalogError):
    """The upload could not be read as a ZIP archive."""

    status_code = status.HTTP_400_BAD_REQUEST


class NoTabularFileFound(CatalogError):
    """The archive holds no entry with the tabular suffix."""

    status_code = status.HTTP_400_BAD_REQUEST


class MalformedTable(CatalogError):
    """The tabular entry could not be tokenized as delimited text."""

    status_code = status.HTTP_400_BAD_REQUEST


class ImportRejected(CatalogError):
    """The entire upload was rejected."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class StoreUnavailable(CatalogError):
    """The catalog store failed in a way that is not a per-row skip."""


class ExportFailed(CatalogError):
    """The catalog could not be rendered for download."""
