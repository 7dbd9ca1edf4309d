"""Pydantic models describing the Neptune control-plane payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class NeptuneBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ClusterEndpointPayload(NeptuneBaseModel):
    cluster_identifier: str = Field(alias="DBClusterIdentifier")
    endpoint_identifier: str = Field(alias="DBClusterEndpointIdentifier")
    status: str | None = Field(default=None, alias="Status")
    endpoint_type: str | None = Field(default=None, alias="EndpointType")
    custom_endpoint_type: str | None = Field(default=None, alias="CustomEndpointType")
    endpoint: str | None = Field(default=None, alias="Endpoint")
    arn: str | None = Field(default=None, alias="DBClusterEndpointArn")
    static_members: list[str] = Field(default_factory=list, alias="StaticMembers")
    excluded_members: list[str] = Field(default_factory=list, alias="ExcludedMembers")

    @field_validator("status", "custom_endpoint_type", "endpoint", mode="before")
    @classmethod
    def _normalize_blanks(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("static_members", "excluded_members", mode="before")
    @classmethod
    def _null_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class DescribeClusterEndpointsResponse(NeptuneBaseModel):
    endpoints: list[ClusterEndpointPayload] = Field(
        default_factory=list, alias="DBClusterEndpoints"
    )
    marker: str | None = Field(default=None, alias="Marker")

    @field_validator("marker", mode="before")
    @classmethod
    def _normalize_marker(cls, value: object) -> object:
        return _blank_to_none(value)


class ErrorDetail(NeptuneBaseModel):
    code: str = Field(alias="Code")
    message: str = Field(default="", alias="Message")


class ErrorResponse(NeptuneBaseModel):
    error: ErrorDetail = Field(alias="Error")
