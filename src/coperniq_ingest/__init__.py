"""CSV to Coperniq project ingestion."""

__version__ = "0.1.0"
