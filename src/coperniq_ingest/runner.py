"""Batch submission loop: fixed-size chunks, sequential rows, fixed inter-batch delay."""

import json
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence

from coperniq_ingest.mapping import RowMappingError, map_row
from coperniq_ingest.models.project import ProjectRecord
from coperniq_ingest.models.raw import RawRow

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10
DEFAULT_DELAY_MS = 1000


@dataclass
class RunSummary:
    """Totals for a completed run."""

    successful: int = 0
    failed: int = 0
    dry_run: bool = False
    batches: int = 0

    def message(self) -> str:
        suffix = " (DRY RUN)" if self.dry_run else ""
        return f"Completed! {self.successful} successful, {self.failed} failed{suffix}"


def chunk_rows(rows: Sequence[RawRow], size: int) -> Iterator[Sequence[RawRow]]:
    """Yield consecutive slices of `size` rows; the last may be shorter."""
    if size < 1:
        raise ValueError(f"batch size must be >= 1, got {size}")
    for start in range(0, len(rows), size):
        yield rows[start : start + size]


def _process_row(
    row: RawRow,
    index: int,
    *,
    submit: Callable[[ProjectRecord], bool],
    dry_run: bool,
    emit: Callable[[str], None],
) -> bool:
    try:
        record = map_row(row)
    except RowMappingError as e:
        logger.error("Error mapping row %d: %s", index, e)
        return False

    if dry_run:
        emit(json.dumps(record.to_payload(), indent=2))
        return True
    return submit(record)


def run_batches(
    rows: Sequence[RawRow],
    *,
    submit: Callable[[ProjectRecord], bool],
    dry_run: bool = False,
    batch_size: int = DEFAULT_BATCH_SIZE,
    delay_ms: int = DEFAULT_DELAY_MS,
    sleep: Callable[[float], None] = time.sleep,
    emit: Callable[[str], None] = print,
    on_batch: Optional[Callable[[int, int], None]] = None,
) -> RunSummary:
    """
    Map and submit rows in input order, batch by batch.
    A failed row is counted and the loop moves on; nothing is retried.
    `sleep` runs between batches only, never after the last one.
    """
    if delay_ms < 0:
        raise ValueError(f"delay must be >= 0 ms, got {delay_ms}")

    summary = RunSummary(dry_run=dry_run)
    total_batches = math.ceil(len(rows) / batch_size) if batch_size > 0 else 0
    row_index = 0

    for batch_number, batch in enumerate(chunk_rows(rows, batch_size), start=1):
        if on_batch is not None:
            on_batch(batch_number, total_batches)
        logger.debug("Batch %d/%d: %d rows", batch_number, total_batches, len(batch))

        for row in batch:
            row_index += 1
            if _process_row(row, row_index, submit=submit, dry_run=dry_run, emit=emit):
                summary.successful += 1
            else:
                summary.failed += 1

        summary.batches += 1
        if batch_number < total_batches:
            sleep(delay_ms / 1000)

    return summary
