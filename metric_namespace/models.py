"""Typed data models used across the metric namespace classifier."""

from __future__ import annotations

from pydantic import BaseModel, Field

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


class IndexObservation(BaseModel):
    """Single metric index and the number of documents it matched."""

    index: str = Field(..., min_length=1)
    doc_count: int = Field(..., ge=0, strict=True)


class AggregationBucket(BaseModel):
    """One bucket of a terms aggregation response."""

    key: str = Field(..., min_length=1)
    doc_count: int = Field(..., ge=0, strict=True)

    def to_observation(self) -> IndexObservation:
        return IndexObservation(index=self.key, doc_count=self.doc_count)


class TermsAggregation(BaseModel):
    buckets: list[AggregationBucket] = Field(default_factory=list)


class AggregationResponse(BaseModel):
    """Search response carrying metric index buckets.

    Accepts either a bare ``{"buckets": [...]}`` object or a full search
    response with the buckets nested under ``aggregations.<name>``.
    """

    buckets: list[AggregationBucket] | None = None
    aggregations: dict[str, TermsAggregation] = Field(default_factory=dict)

    def buckets_for(self, aggregation_name: str) -> list[AggregationBucket]:
        if self.buckets is not None:
            return list(self.buckets)
        aggregation = self.aggregations.get(aggregation_name)
        if aggregation is None:
            raise ValueError(f"aggregation {aggregation_name!r} not found in response")
        return list(aggregation.buckets)


class MetricName(BaseModel):
    """Entry of a namespace listing."""

    name: str
    is_complete_name: bool


class MetricNameListing(BaseModel):
    """Classified view of one aggregation response."""

    base_level: int = Field(..., ge=0)
    next_level: list[str] = Field(default_factory=list)
    complete: list[str] = Field(default_factory=list)
    metric_names: list[MetricName] = Field(default_factory=list)


class MetricNamespaceConfig(BaseModel):
    """Runtime configuration switches."""

    aggregation_name: str = Field("metric_name_tokens", min_length=1)
    default_base_level: int = Field(0, ge=0)
    include_complete_names: bool = True
