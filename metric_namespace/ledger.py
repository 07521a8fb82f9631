"""Doc-count ledger keyed by base-level metric index."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class DocCountRecord:
    """Counts observed for one base-level index."""

    actual_doc_count: int = 0
    children_total_doc_count: int = 0

    def with_actual(self, doc_count: int) -> DocCountRecord:
        return replace(self, actual_doc_count=doc_count)

    def with_children(self, doc_count: int) -> DocCountRecord:
        return replace(self, children_total_doc_count=self.children_total_doc_count + doc_count)

    @property
    def is_complete_name(self) -> bool:
        """True when more documents match the index than its children account for."""
        return (
            self.actual_doc_count > 0
            and self.actual_doc_count > self.children_total_doc_count
        )


EMPTY_RECORD = DocCountRecord()


@dataclass
class DocCountLedger:
    """In-memory mapping of base-level index to its doc counts."""

    _records: dict[str, DocCountRecord] = field(default_factory=dict)

    def get(self, index: str) -> DocCountRecord:
        return self._records.get(index, EMPTY_RECORD)

    def set_actual(self, index: str, doc_count: int) -> None:
        """Overwrite the doc count reported for ``index`` itself."""
        self._records[index] = self.get(index).with_actual(doc_count)

    def add_children(self, index: str, doc_count: int) -> None:
        """Accumulate doc counts reported for children of ``index``."""
        self._records[index] = self.get(index).with_children(doc_count)

    def items(self) -> Iterator[tuple[str, DocCountRecord]]:
        return iter(list(self._records.items()))

    def __contains__(self, index: object) -> bool:
        return index in self._records

    def __len__(self) -> int:
        return len(self._records)
