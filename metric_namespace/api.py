"""Public API facade for the metric namespace classifier."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from .models import AggregationBucket, AggregationResponse, MetricNameListing, MetricNamespaceConfig
from .service import MetricNamespaceService


class MetricNamespaceAPI:
    """High-level façade consumed by namespace browsing endpoints."""

    def __init__(self, config: MetricNamespaceConfig) -> None:
        self._service = MetricNamespaceService(config)

    @property
    def config(self) -> MetricNamespaceConfig:
        return self._service.config

    def browse(
        self,
        buckets: Iterable[AggregationBucket],
        *,
        base_level: int | None = None,
        prefix: str | None = None,
    ) -> MetricNameListing:
        """Classify in-memory buckets."""
        return self._service.listing(buckets, base_level=base_level, prefix=prefix)

    def browse_response(
        self,
        response: AggregationResponse | Mapping[str, Any],
        *,
        base_level: int | None = None,
        prefix: str | None = None,
    ) -> MetricNameListing:
        """Classify a raw or parsed search response."""
        if not isinstance(response, AggregationResponse):
            response = AggregationResponse.model_validate(response)
        return self._service.listing_from_response(response, base_level=base_level, prefix=prefix)

    def browse_file(
        self,
        path: str | Path,
        *,
        base_level: int | None = None,
        prefix: str | None = None,
    ) -> MetricNameListing:
        """Load a JSON search response and classify it."""
        return self._service.listing_from_json(Path(path), base_level=base_level, prefix=prefix)

    def listing_json(self, listing: MetricNameListing, *, pretty: bool = True) -> str:
        return self._service.dump_json(listing, indent=2 if pretty else None)


def build_api(config: MetricNamespaceConfig | None = None) -> MetricNamespaceAPI:
    """Convenience constructor with defaults."""
    return MetricNamespaceAPI(config or MetricNamespaceConfig())
