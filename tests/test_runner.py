"""Tests for the batch submission loop."""

import json

import pytest

from coperniq_ingest.mapping import map_row
from coperniq_ingest.models.project import ProjectRecord
from coperniq_ingest.runner import RunSummary, chunk_rows, run_batches


def _rows(sample_row: dict[str, str], n: int) -> list[dict[str, str]]:
    rows = []
    for i in range(n):
        row = dict(sample_row)
        row["title"] = f"Project {i + 1}"
        rows.append(row)
    return rows


class TestChunkRows:
    """Tests for chunk_rows."""

    def test_sizes(self) -> None:
        """25 rows in chunks of 10 gives 10, 10, 5."""
        chunks = list(chunk_rows([{}] * 25, 10))
        assert [len(c) for c in chunks] == [10, 10, 5]

    def test_empty(self) -> None:
        assert list(chunk_rows([], 10)) == []

    def test_invalid_size(self) -> None:
        with pytest.raises(ValueError):
            list(chunk_rows([{}], 0))


class TestRunBatches:
    """Tests for run_batches."""

    def test_batching_and_delay_count(self, sample_row: dict[str, str]) -> None:
        """Sleep runs between batches only: twice for three batches."""
        sleeps: list[float] = []
        batches: list[tuple[int, int]] = []
        summary = run_batches(
            _rows(sample_row, 25),
            submit=lambda record: True,
            batch_size=10,
            delay_ms=1500,
            sleep=sleeps.append,
            on_batch=lambda n, total: batches.append((n, total)),
        )
        assert sleeps == [1.5, 1.5]
        assert batches == [(1, 3), (2, 3), (3, 3)]
        assert summary == RunSummary(successful=25, failed=0, dry_run=False, batches=3)

    def test_single_batch_never_sleeps(self, sample_row: dict[str, str]) -> None:
        sleeps: list[float] = []
        run_batches(_rows(sample_row, 10), submit=lambda r: True, batch_size=10, sleep=sleeps.append)
        assert sleeps == []

    def test_rows_submitted_in_order(self, sample_row: dict[str, str]) -> None:
        """Rows go out in file order across batches."""
        titles: list[str] = []

        def submit(record: ProjectRecord) -> bool:
            titles.append(record.title)
            return True

        run_batches(_rows(sample_row, 7), submit=submit, batch_size=3, sleep=lambda s: None)
        assert titles == [f"Project {i}" for i in range(1, 8)]

    def test_partial_failure_continues(self, sample_row: dict[str, str]) -> None:
        """A failed row is counted and the next row is still attempted."""
        attempted: list[str] = []

        def submit(record: ProjectRecord) -> bool:
            attempted.append(record.title)
            return record.title != "Project 2"

        summary = run_batches(_rows(sample_row, 3), submit=submit, sleep=lambda s: None)
        assert attempted == ["Project 1", "Project 2", "Project 3"]
        assert summary.successful == 2
        assert summary.failed == 1
        assert summary.message() == "Completed! 2 successful, 1 failed"

    def test_dry_run_never_submits(self, sample_row: dict[str, str]) -> None:
        """Dry run prints the mapped payload and counts every row as successful."""
        emitted: list[str] = []

        def submit(record: ProjectRecord) -> bool:
            raise AssertionError("submit called during dry run")

        rows = _rows(sample_row, 3)
        summary = run_batches(
            rows,
            submit=submit,
            dry_run=True,
            batch_size=2,
            sleep=lambda s: None,
            emit=emitted.append,
        )
        assert summary.successful == 3
        assert summary.failed == 0
        assert summary.message() == "Completed! 3 successful, 0 failed (DRY RUN)"
        assert [json.loads(e) for e in emitted] == [map_row(r).to_payload() for r in rows]

    def test_mapping_error_counts_as_failure(self, sample_row: dict[str, str]) -> None:
        """A row with a bad numeric column fails without reaching submit."""
        rows = _rows(sample_row, 3)
        rows[1]["workflowId"] = "not-a-number"
        submitted: list[str] = []

        def submit(record: ProjectRecord) -> bool:
            submitted.append(record.title)
            return True

        summary = run_batches(rows, submit=submit, sleep=lambda s: None)
        assert submitted == ["Project 1", "Project 3"]
        assert (summary.successful, summary.failed) == (2, 1)

    def test_no_rows(self) -> None:
        sleeps: list[float] = []
        summary = run_batches([], submit=lambda r: True, sleep=sleeps.append)
        assert summary == RunSummary()
        assert sleeps == []

    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(ValueError):
            run_batches([], submit=lambda r: True, delay_ms=-1)

    def test_oversized_custom_number_does_not_abort(self, sample_row: dict[str, str]) -> None:
        """A custom cell too long to convert is sent as text and the run finishes."""
        rows = _rows(sample_row, 2)
        rows[0]["serial"] = "1" * 5000
        submitted: list[ProjectRecord] = []

        def submit(record: ProjectRecord) -> bool:
            submitted.append(record)
            return True

        summary = run_batches(rows, submit=submit, sleep=lambda s: None)
        assert (summary.successful, summary.failed) == (2, 0)
        assert submitted[0].custom["serial"] == "1" * 5000
