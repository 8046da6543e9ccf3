"""HTTP client for the Coperniq /projects endpoint."""

import json
import logging
from typing import Optional

import httpx

from coperniq_ingest.config import Settings
from coperniq_ingest.models.project import ProjectRecord

logger = logging.getLogger(__name__)


class ProjectsClient:
    """
    Submits mapped project records one at a time.
    submit() never raises; every failure is logged and reported as False.
    """

    PROJECTS_PATH = "/projects"

    DEFAULT_HEADERS = {
        "User-Agent": "coperniq-ingest/0.1",
    }

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        self._settings = settings
        self._client = client or httpx.Client(timeout=None, headers=self.DEFAULT_HEADERS)

    def __enter__(self) -> "ProjectsClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _error_detail(self, response: httpx.Response) -> Optional[str]:
        """Best-effort error body for diagnostics."""
        try:
            return json.dumps(response.json())
        except ValueError:
            text = response.text.strip()
            return text or None

    def submit(self, record: ProjectRecord) -> bool:
        """POST one record. True on a 2xx response."""
        url = self._settings.base_url + self.PROJECTS_PATH
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self._settings.api_key,
        }
        try:
            response = self._client.post(
                url,
                params=self._settings.query_params(),
                headers=headers,
                json=record.to_payload(),
            )
        except httpx.HTTPError as e:
            logger.error("Error ingesting row %r: %s", record.title, e)
            return False

        if not response.is_success:
            detail = self._error_detail(response)
            logger.error(
                "Error ingesting row %r: HTTP error! status: %d%s",
                record.title,
                response.status_code,
                f", message: {detail}" if detail else "",
            )
            return False

        logger.debug("Ingested %r (status %d)", record.title, response.status_code)
        return True
