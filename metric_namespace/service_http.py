from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable

import uvicorn
from fastapi import FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .api import build_api
from .models import (
    LOG_LEVELS,
    AggregationBucket,
    AggregationResponse,
    MetricNameListing,
    MetricNamespaceConfig,
)


class BrowseRequest(BaseModel):
    """Payload carrying the buckets of one aggregation response."""

    buckets: list[AggregationBucket]
    base_level: int | None = Field(default=None, ge=0)
    prefix: str | None = None


def create_app(
    config: MetricNamespaceConfig | None = None, *, cors_origins: Iterable[str] | None = None
) -> FastAPI:
    """Construct a FastAPI app backed by MetricNamespaceAPI."""

    api = build_api(config)
    app = FastAPI(title="Metric Namespace", version="0.1.0")
    app.state.api = api

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/healthz", status_code=status.HTTP_200_OK)
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/browse", response_model=MetricNameListing)
    def browse(payload: BrowseRequest) -> MetricNameListing:
        try:
            return app.state.api.browse(
                payload.buckets, base_level=payload.base_level, prefix=payload.prefix
            )
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    @app.post("/browse/search-response", response_model=MetricNameListing)
    def browse_search_response(
        search_response: AggregationResponse,
        base_level: int | None = Query(default=None, ge=0),
        prefix: str | None = Query(default=None),
    ) -> MetricNameListing:
        try:
            return app.state.api.browse_response(
                search_response, base_level=base_level, prefix=prefix
            )
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return app


def run(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the metric namespace HTTP service.")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind.")
    parser.add_argument("--port", type=int, default=8000, help="TCP port for the service.")
    parser.add_argument(
        "--aggregation-name",
        default="metric_name_tokens",
        help="Aggregation holding the metric index buckets in search responses.",
    )
    parser.add_argument(
        "--default-base-level",
        type=int,
        default=0,
        help="Base level used when a request gives neither base level nor prefix.",
    )
    parser.add_argument(
        "--next-level-only",
        action="store_true",
        help="Omit complete metric names from listings.",
    )
    parser.add_argument(
        "--cors-origin",
        action="append",
        dest="cors_origins",
        default=None,
        help="Optional CORS origin (repeatable).",
    )
    parser.add_argument(
        "--log-level", default="info", type=str.lower, choices=LOG_LEVELS, help="Logging level."
    )
    args = parser.parse_args(argv)
    if args.default_base_level < 0:
        parser.error("--default-base-level must be >= 0")

    logging.basicConfig(level=args.log_level.upper())
    config = MetricNamespaceConfig(
        aggregation_name=args.aggregation_name,
        default_base_level=args.default_base_level,
        include_complete_names=not args.next_level_only,
    )
    app = create_app(config=config, cors_origins=args.cors_origins)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


app = create_app()
