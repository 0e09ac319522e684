# WORKFLOW: Operator bootstrap script for the price catalog database.
# Used by: Initial setup, manual imports/exports outside the HTTP API
# Commands:
# 1. init-db - Create the prices table if it does not exist
# 2. import <zip> - Run a ZIP archive through the import pipeline
# 3. export <zip> - Write the whole catalog to a ZIP archive
# 4. validate - Check database connectivity and report catalog statistics
#
# Bootstrap flow: init-db -> import -> validate
# Uses the same pipelines as the API, with a session from db.session.

"""
Bootstrap and file-based import/export for the Price Catalog service.
"""

import sys
import logging
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.config import settings  # noqa: E402
from core.exceptions import CatalogError  # noqa: E402
from db.session import check_db_connection, get_db, init_db  # noqa: E402
from services.catalog_store import SqlCatalogStore  # noqa: E402
from services.price_export import PriceExportPipeline  # noqa: E402
from services.price_import import PriceImportPipeline  # noqa: E402

logger = logging.getLogger(__name__)


def import_archive(zip_path: Path) -> int:
    """
    Import a ZIP archive from disk.

    Args:
        zip_path: Path to the ZIP file holding one CSV file

    Returns:
        Process exit code
    """
    payload = zip_path.read_bytes()
    db_gen = get_db()
    db = next(db_gen)
    try:
        pipeline = PriceImportPipeline(
            SqlCatalogStore(db),
            suffix=settings.tabular_suffix,
            require_text=settings.require_text_fields,
        )
        summary = pipeline.run(payload)
    finally:
        db_gen.close()

    print(summary.model_dump_json())
    return 0


def export_archive(zip_path: Path) -> int:
    """
    Export the catalog to a ZIP archive on disk.

    Args:
        zip_path: Destination path

    Returns:
        Process exit code
    """
    db_gen = get_db()
    db = next(db_gen)
    try:
        pipeline = PriceExportPipeline(
            SqlCatalogStore(db),
            archive_name=zip_path.name,
            entry_name=settings.export_entry_name,
        )
        bundle = pipeline.run()
    finally:
        db_gen.close()

    zip_path.parent.mkdir(parents=True, exist_ok=True)
    zip_path.write_bytes(bundle.content)
    logger.info(f"Wrote {bundle.record_count} records to {zip_path}")
    return 0


def validate_setup() -> int:
    """
    Check connectivity and log catalog statistics.

    Returns:
        Process exit code
    """
    if not check_db_connection():
        logger.error("Database connection validation failed")
        return 1

    db_gen = get_db()
    db = next(db_gen)
    try:
        categories, total = SqlCatalogStore(db).aggregate_stats()
    finally:
        db_gen.close()

    logger.info(f"Catalog contains {categories} categories, total price {total}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Price Catalog bootstrap')
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('init-db', help='Create the prices table')

    import_parser = subparsers.add_parser('import', help='Import a ZIP archive')
    import_parser.add_argument('zip_path', type=Path)

    export_parser = subparsers.add_parser('export', help='Export the catalog to a ZIP archive')
    export_parser.add_argument('zip_path', type=Path)

    subparsers.add_parser('validate', help='Check database connectivity')
    return parser


def main(argv=None) -> int:
    """
    Main bootstrap function.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        if args.command == 'init-db':
            init_db()
            return 0
        if args.command == 'import':
            init_db()
            return import_archive(args.zip_path)
        if args.command == 'export':
            return export_archive(args.zip_path)
        return validate_setup()

    except CatalogError as e:
        logger.error(f"{args.command} failed: {e.message}")
        return 1
    except OSError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
