"""Coperniq project record sent to the /projects endpoint."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProjectRecord(BaseModel):
    """
    Canonical project payload produced from one CSV row.
    Attributes are snake_case; the API sees camelCase via aliases.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    description: str
    address: list[str] = Field(..., description="API expects a list; CSV carries one address")
    is_active: bool
    status: str
    primary_email: str
    primary_phone: str

    workflow_id: int
    client_id: int
    owner_id: int
    sales_rep_id: int
    project_manager_id: int

    value: float
    size: float

    trades: list[str] = Field(default_factory=list)
    custom: dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON body the API accepts."""
        return self.model_dump(mode="json", by_alias=True)
