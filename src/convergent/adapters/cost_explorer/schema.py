"""Pydantic models describing Cost Explorer anomaly monitor payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CostExplorerBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AnomalyMonitorPayload(CostExplorerBaseModel):
    arn: str = Field(alias="MonitorArn")
    name: str = Field(alias="MonitorName")
    monitor_type: str = Field(alias="MonitorType")
    dimension: str | None = Field(default=None, alias="MonitorDimension")
    specification: dict[str, Any] | None = Field(default=None, alias="MonitorSpecification")
    creation_date: date | None = Field(default=None, alias="CreationDate")
    last_updated_date: date | None = Field(default=None, alias="LastUpdatedDate")

    @field_validator("creation_date", "last_updated_date", mode="before")
    @classmethod
    def _parse_date(cls, value: object) -> object:
        # The service reports dates as "YYYY-MM-DD" but timestamps have been seen too.
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return None
            if "T" in stripped:
                return datetime.fromisoformat(stripped.replace("Z", "+00:00")).date()
            return stripped
        return value


class GetAnomalyMonitorsResponse(CostExplorerBaseModel):
    monitors: list[AnomalyMonitorPayload] = Field(
        default_factory=list, alias="AnomalyMonitors"
    )
    next_page_token: str | None = Field(default=None, alias="NextPageToken")

    @field_validator("next_page_token", mode="before")
    @classmethod
    def _blank_token(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CreateAnomalyMonitorResponse(CostExplorerBaseModel):
    arn: str = Field(alias="MonitorArn")


class ErrorDetail(CostExplorerBaseModel):
    code: str = Field(alias="Code")
    message: str = Field(default="", alias="Message")


class ErrorResponse(CostExplorerBaseModel):
    error: ErrorDetail = Field(alias="Error")
