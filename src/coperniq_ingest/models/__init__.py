"""Data models for raw CSV rows and mapped project records."""

from coperniq_ingest.models.project import ProjectRecord
from coperniq_ingest.models.raw import RawRow

__all__ = ["ProjectRecord", "RawRow"]
