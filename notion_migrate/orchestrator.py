"""Migration engine - coordinates fetching, mapping and page creation."""

import logging
import time
from datetime import datetime
from typing import Callable, Iterator, List, Optional

from .clients.base import CollectionClient
from .errors import RemoteError
from .models.migration import MigrationRun, MigrationStatus
from .models.record import MigrationResult, PageRecord
from .models.schema import DatabaseSchema
from .services.mapper import PropertyMapper

logger = logging.getLogger(__name__)

DEFAULT_PACING_DELAY = 0.1


class MigrationEngine:
    """
    Copies every page of a source database into a target database.

    Handles:
    - Full retrieval of the source database before any writes
    - Target schema lookup
    - Property mapping per page
    - Sequential batches with a fixed delay after each page
    - Per-page failure isolation
    - Dry-run simulation
    """

    def __init__(
        self,
        client: CollectionClient,
        mapper: Optional[PropertyMapper] = None,
        pacing_delay: float = DEFAULT_PACING_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        progress: Optional[Callable[[MigrationResult], None]] = None
    ):
        """
        Initialize the engine.

        Args:
            client: Client for the remote database service
            mapper: Property mapper (a default one is created if omitted)
            pacing_delay: Seconds to wait after each page, live or dry-run
            sleep: Function used to wait between pages
            progress: Optional callback invoked with each page's result
        """
        self.client = client
        self.mapper = mapper or PropertyMapper()
        self.pacing_delay = pacing_delay
        self._sleep = sleep
        self._progress = progress

    def run(
        self,
        source_id: str,
        target_id: str,
        dry_run: bool = False,
        batch_size: int = 10
    ) -> MigrationRun:
        """
        Run a complete migration.

        Fetch errors from the source query or the schema lookup propagate
        to the caller; page creation errors are counted and skipped.

        Args:
            source_id: ID of the database to read from
            target_id: ID of the database to create pages in
            dry_run: If True, map every page but create nothing
            batch_size: Number of pages per batch

        Returns:
            MigrationRun with the final tallies
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be greater than 0, got {batch_size}")

        run = MigrationRun(
            source_id=source_id,
            target_id=target_id,
            dry_run=dry_run,
            batch_size=batch_size,
        )
        run.started_at = datetime.utcnow()

        logger.info("Starting migration...")
        logger.info(f"   Source database: {source_id}")
        logger.info(f"   Target database: {target_id}")
        logger.info(f"   Dry-run mode: {'YES' if dry_run else 'NO'}")

        try:
            logger.info("=== PHASE 1: FETCH SOURCE ===")
            run.status = MigrationStatus.FETCHING_SOURCE
            records = self._fetch_source(source_id)
            run.records_fetched = len(records)

            logger.info("=== PHASE 2: FETCH TARGET SCHEMA ===")
            run.status = MigrationStatus.FETCHING_SCHEMA
            schema = self._fetch_schema(target_id)

        except Exception as e:
            run.status = MigrationStatus.FAILED
            run.completed_at = datetime.utcnow()
            logger.error(f"Migration failed: {e}")
            raise

        logger.info("=== PHASE 3: MIGRATE ===")
        run.status = MigrationStatus.MIGRATING
        self._run_migration(run, records, schema)

        run.status = MigrationStatus.COMPLETED
        run.completed_at = datetime.utcnow()

        logger.info("=== MIGRATION COMPLETED ===")
        if run.dry_run:
            logger.info(f"   Pages simulated (nothing created): {run.succeeded}")
        else:
            logger.info(f"   Pages migrated successfully: {run.succeeded}")
        if run.failed:
            logger.info(f"   Pages with errors: {run.failed}")

        return run

    def _fetch_source(self, source_id: str) -> List[PageRecord]:
        """Fetch every page of the source database."""
        logger.info(f"Fetching pages from source database: {source_id}")
        records = self.client.fetch_all(source_id)
        logger.info(f"Total pages found: {len(records)}")
        return records

    def _fetch_schema(self, target_id: str) -> DatabaseSchema:
        """Fetch the target database schema."""
        logger.info(f"Analyzing target database schema: {target_id}")
        schema = self.client.fetch_schema(target_id)
        logger.info(f"Properties found: {', '.join(schema.property_names)}")
        logger.debug(f"Target schema: {schema.to_dict()}")
        return schema

    def _run_migration(
        self,
        run: MigrationRun,
        records: List[PageRecord],
        schema: DatabaseSchema
    ) -> None:
        """Map and create every page, batch by batch."""
        run.batches_total = (len(records) + run.batch_size - 1) // run.batch_size

        for index, batch in enumerate(self._batch_iterator(records, run.batch_size), 1):
            run.current_batch = index
            logger.info(f"   Processing batch {index}/{run.batches_total}...")

            for record in batch:
                result = self._migrate_record(record, schema, run)
                run.results.append(result)

                if result.success:
                    run.record_success()
                else:
                    run.record_failure(record.id, result.error or "unknown error")

                if self._progress:
                    self._progress(result)

                self._sleep(self.pacing_delay)

    def _migrate_record(
        self,
        record: PageRecord,
        schema: DatabaseSchema,
        run: MigrationRun
    ) -> MigrationResult:
        """Map one page and create it in the target unless dry-running."""
        properties = self.mapper.map_properties(record, schema)
        names = list(properties.keys())

        if run.dry_run:
            logger.info(f"   [DRY-RUN] Would create page with properties: {names}")
            return MigrationResult(
                record_id=record.id,
                success=True,
                dry_run=True,
                properties=names,
                completed_at=datetime.utcnow(),
            )

        try:
            created = self.client.create_record(run.target_id, properties)
        except RemoteError as e:
            logger.error(f"Failed to migrate page {record.id}: {e}")
            return MigrationResult(
                record_id=record.id,
                success=False,
                error=str(e),
                properties=names,
                completed_at=datetime.utcnow(),
            )

        return MigrationResult(
            record_id=record.id,
            target_id=created.id,
            success=True,
            properties=names,
            completed_at=datetime.utcnow(),
        )

    def _batch_iterator(
        self,
        records: List[PageRecord],
        batch_size: int
    ) -> Iterator[List[PageRecord]]:
        """Iterate over records in batches."""
        for i in range(0, len(records), batch_size):
            yield records[i:i + batch_size]
