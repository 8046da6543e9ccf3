"""Pytest fixtures for coperniq-ingest tests."""

import csv
from io import StringIO
from pathlib import Path

import pytest

from coperniq_ingest.config import Settings


def build_csv(rows: list[dict]) -> str:
    """Build CSV string from list of row dicts."""
    if not rows:
        return ""
    out = StringIO()
    writer = csv.DictWriter(out, fieldnames=rows[0].keys())
    writer.writeheader()
    writer.writerows(rows)
    return out.getvalue()


@pytest.fixture
def sample_row() -> dict[str, str]:
    """Sample CSV row with every standard column plus custom columns."""
    return {
        "title": "Smith Residence Solar",
        "description": "8kW rooftop install",
        "address": "123 Main St",
        "isActive": "True",
        "status": "ACTIVE",
        "primaryEmail": "smith@example.com",
        "primaryPhone": "555-0100",
        "workflowId": "12",
        "clientId": "345",
        "value": "24999.50",
        "size": "8.2",
        "ownerId": "7",
        "salesRepId": "8",
        "projectManagerId": "9",
        "trades": "solar, roofing,hvac",
        "utility": "PG&E",
        "panelCount": "22",
        "financed": "false",
    }


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a fake API."""
    return Settings(base_url="https://api.test", api_key="secret-key")


@pytest.fixture
def sample_csv_file(tmp_path: Path, sample_row: dict[str, str]) -> Path:
    """CSV file with header and three data rows."""
    rows = []
    for i in range(3):
        row = dict(sample_row)
        row["title"] = f"Project {i + 1}"
        rows.append(row)
    path = tmp_path / "projects.csv"
    path.write_text(build_csv(rows), encoding="utf-8")
    return path
