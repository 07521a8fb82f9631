"""Classification of aggregated metric indexes relative to a base level.

Ingesting ``foo.bar.baz.aux`` and ``foo.bar.baz`` makes the search index
produce these metric indexes::

    metric             indexes
    foo.bar.baz.aux -> foo, foo.bar, foo.bar.baz, foo.bar.baz.aux
    foo.bar.baz     -> foo, foo.bar, foo.bar.baz

Aggregating the indexes matching ``foo.bar.*`` returns buckets like::

    [{"key": "foo.bar.baz", "doc_count": 2},
     {"key": "foo.bar.baz.aux", "doc_count": 1}]

where ``doc_count`` is the number of metric names matched by the key. Fed
through :meth:`MetricIndexData.add` with a base level of 3, ``foo.bar.baz`` is
reported as having a next level (``aux``) and, since 2 documents match it
while its children only account for 1, as a complete metric name too.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .ledger import DocCountLedger, DocCountRecord
from .models import AggregationBucket, IndexObservation
from .tokens import IndexLevel, classify, parent_index

logger = logging.getLogger(__name__)

Observation = IndexObservation | tuple[str, int]


class MetricIndexData:
    """Accumulates metric index buckets of one aggregation response."""

    def __init__(self, base_level: int) -> None:
        if base_level < 0:
            raise ValueError(f"base_level must be >= 0, got {base_level}")
        self._base_level = base_level
        self._names_with_next_level: set[str] = set()
        self._ledger = DocCountLedger()

    @property
    def base_level(self) -> int:
        return self._base_level

    @classmethod
    def from_buckets(
        cls, base_level: int, buckets: Iterable[AggregationBucket]
    ) -> MetricIndexData:
        """Build an instance already fed with every bucket."""
        data = cls(base_level)
        data.add_all(bucket.to_observation() for bucket in buckets)
        return data

    def add(self, index: str, doc_count: int) -> None:
        """Classify one metric index and record its doc count.

        Raises ``ValueError`` for an empty index or a doc count that is not a
        non-negative integer.
        Indexes that are neither at the base level nor one level below it
        are ignored.
        """
        observation = IndexObservation(index=index, doc_count=doc_count)
        self._add(observation)

    def add_all(self, observations: Iterable[Observation]) -> None:
        for item in observations:
            if isinstance(item, IndexObservation):
                self._add(item)
            else:
                self.add(*item)

    def _add(self, observation: IndexObservation) -> None:
        index = observation.index
        level = classify(index, self._base_level)
        if level is IndexLevel.NEXT:
            parent = parent_index(index, self._base_level)
            self._names_with_next_level.add(parent)
            self._ledger.add_children(parent, observation.doc_count)
        elif level is IndexLevel.BASE:
            self._ledger.set_actual(index, observation.doc_count)
        else:
            logger.debug("ignoring index %r at base level %d", index, self._base_level)

    def metric_names_with_next_level(self) -> frozenset[str]:
        """Base-level names with at least one index one level below them."""
        return frozenset(self._names_with_next_level)

    def complete_metric_names_at_base_level(self) -> frozenset[str]:
        """Base-level names that are metric names in their own right.

        A name qualifies when it matched more documents than its immediate
        children account for. Equal counts mean it is only a path prefix.
        """
        return frozenset(
            index for index, record in self._ledger.items() if record.is_complete_name
        )

    def record(self, index: str) -> DocCountRecord:
        """Counts recorded for a base-level index, zero when never seen."""
        return self._ledger.get(index)

    def __len__(self) -> int:
        return len(self._ledger)
