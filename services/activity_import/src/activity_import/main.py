import argparse
import asyncio
from dataclasses import dataclass
import json
import logging
from pathlib import Path
import sys
from typing import Any, List, Optional

from gateway_common.db import RecordStore
from gateway_common.errors import GatewayError
from gateway_common.metrics import IMPORTED_RECORDS_TOTAL
from gateway_common.normalize import to_activity_record
from activity_import.config import get_settings

logger = logging.getLogger(__name__)

ACTIVITIES_TABLE = "activities"


class ImportFileError(Exception):
    """The import file could not be read or does not hold a list of records."""


@dataclass
class ImportSummary:
    total: int = 0
    succeeded: int = 0
    failed: int = 0


def load_records(path: Path) -> List[Any]:
    """Read the exported activities from a JSON file.

    Raises:
        ImportFileError: The file is missing, unreadable, not JSON, or not
            a JSON array.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ImportFileError(f"Error reading or parsing {path}: {str(e)}") from e

    if not isinstance(data, list):
        raise ImportFileError(f"Expected a JSON array of activities in {path}, got {type(data).__name__}")
    return data


class ActivityImporter:
    """Normalizes exported activities and inserts them one batch at a time.

    With the default concurrency of 1 records are inserted strictly in
    order, one in flight at a time. Larger values insert that many records
    concurrently per batch. The fixed delay after each batch keeps the
    request rate against the store bounded either way.

    Example:
        ```python
        importer = ActivityImporter(store, delay=0.1)
        summary = await importer.run(load_records(Path("assets/activities.json")))
        ```
    """

    def __init__(self, store: RecordStore, delay: float = 0.1, concurrency: int = 1) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.store = store
        self.delay = delay
        self.concurrency = concurrency

    async def import_record(self, record: Any) -> bool:
        """Insert one record, returning False instead of raising on failure."""
        try:
            activity = to_activity_record(record)
            await self.store.insert(ACTIVITIES_TABLE, activity.model_dump())
        except GatewayError as e:
            logger.error(f"Error inserting record: {e.message}")
            logger.error(f"Data: {record}")
            IMPORTED_RECORDS_TOTAL.labels("failed").inc()
            return False

        logger.info(f"Successfully inserted activity: {activity.name}")
        IMPORTED_RECORDS_TOTAL.labels("succeeded").inc()
        return True

    async def run(self, records: List[Any]) -> ImportSummary:
        summary = ImportSummary(total=len(records))

        for batch in [
            records[i : i + self.concurrency]
            for i in range(0, len(records), self.concurrency)
        ]:
            results = await asyncio.gather(
                *[self.import_record(record) for record in batch],
                return_exceptions=True,
            )

            for result in results:
                if isinstance(result, Exception):
                    logger.error(f"Error processing record: {str(result)}")
                    IMPORTED_RECORDS_TOTAL.labels("failed").inc()

            batch_succeeded = sum(1 for r in results if r is True)
            summary.succeeded += batch_succeeded
            summary.failed += len(results) - batch_succeeded

            await asyncio.sleep(self.delay)

        return summary


async def import_activities(
    path: Path,
    store: RecordStore,
    delay: float,
    concurrency: int = 1,
) -> ImportSummary:
    """Load the file and import every record, disposing the store afterwards."""
    try:
        records = load_records(path)
        logger.info(f"Importing {len(records)} activities from {path}")
        return await ActivityImporter(store, delay=delay, concurrency=concurrency).run(records)
    finally:
        await store.dispose()


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Import exported activities into the store")
    parser.add_argument("--file", type=Path, default=Path(settings.IMPORT_FILE), help="JSON file of activities")
    parser.add_argument("--delay", type=float, default=settings.IMPORT_DELAY_SECONDS, help="Seconds to wait between batches")
    parser.add_argument("--concurrency", type=int, default=settings.IMPORT_CONCURRENCY, help="Records inserted per batch")
    parser.add_argument("--log-level", type=str, default=settings.LOG_LEVEL, help="Logging level")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.concurrency < 1:
        parser.error("--concurrency must be at least 1")
    if not settings.DATABASE_URL:
        parser.error("DATABASE_URL must be set")

    logger.info("Starting import process...")
    store = RecordStore.from_url(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    try:
        summary = asyncio.run(import_activities(args.file, store, args.delay, args.concurrency))
    except ImportFileError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info("Import completed!")
    logger.info(f"Successfully imported: {summary.succeeded} records")
    logger.info(f"Failed to import: {summary.failed} records")


if __name__ == "__main__":
    main()
