"""Service turning aggregation responses into namespace listings."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from .index_data import MetricIndexData
from .models import (
    AggregationBucket,
    AggregationResponse,
    MetricName,
    MetricNameListing,
    MetricNamespaceConfig,
)
from .tokens import base_level_for_prefix

logger = logging.getLogger(__name__)


class MetricNamespaceService:
    """Coordinates classification of one aggregation response at a time."""

    def __init__(self, config: MetricNamespaceConfig) -> None:
        self.config = config

    def resolve_base_level(self, base_level: int | None = None, prefix: str | None = None) -> int:
        """Pick the explicit base level, else the prefix depth, else the default."""
        if base_level is not None:
            return base_level
        if prefix:
            return base_level_for_prefix(prefix)
        return self.config.default_base_level

    def classify(self, buckets: Iterable[AggregationBucket], base_level: int) -> MetricIndexData:
        """Feed every bucket into a fresh classifier."""
        buckets = list(buckets)
        data = MetricIndexData.from_buckets(base_level, buckets)
        logger.info(
            "classified %d buckets at base level %d into %d base-level names",
            len(buckets),
            base_level,
            len(data),
        )
        return data

    def listing(
        self,
        buckets: Iterable[AggregationBucket],
        *,
        base_level: int | None = None,
        prefix: str | None = None,
    ) -> MetricNameListing:
        """Classify buckets and build the browsing listing."""
        level = self.resolve_base_level(base_level, prefix)
        data = self.classify(buckets, level)
        next_level = sorted(data.metric_names_with_next_level())
        complete = (
            sorted(data.complete_metric_names_at_base_level())
            if self.config.include_complete_names
            else []
        )
        names = [MetricName(name=name, is_complete_name=False) for name in next_level]
        names.extend(MetricName(name=name, is_complete_name=True) for name in complete)
        return MetricNameListing(
            base_level=level,
            next_level=next_level,
            complete=complete,
            metric_names=names,
        )

    def listing_from_response(
        self,
        response: AggregationResponse,
        *,
        base_level: int | None = None,
        prefix: str | None = None,
    ) -> MetricNameListing:
        buckets = response.buckets_for(self.config.aggregation_name)
        return self.listing(buckets, base_level=base_level, prefix=prefix)

    def listing_from_json(
        self,
        path: Path,
        *,
        base_level: int | None = None,
        prefix: str | None = None,
    ) -> MetricNameListing:
        """Read an aggregation response JSON file and classify it."""
        with path.open("r", encoding="utf-8") as fh:
            response = AggregationResponse.model_validate_json(fh.read())
        return self.listing_from_response(response, base_level=base_level, prefix=prefix)

    def dump_json(self, listing: MetricNameListing, *, indent: int | None = 2) -> str:
        """Serialize a listing for callers that need a blob."""
        return json.dumps(listing.model_dump(), indent=indent)
