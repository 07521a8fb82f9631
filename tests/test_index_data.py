from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from metric_namespace.index_data import MetricIndexData
from metric_namespace.ledger import DocCountRecord
from metric_namespace.models import AggregationBucket, IndexObservation
from metric_namespace.tokens import reference_depth


def test_complete_name_with_extra_docs_beyond_children() -> None:
    data = MetricIndexData(3)
    data.add("foo.bar.baz", 2)
    data.add("foo.bar.baz.aux", 1)

    assert data.metric_names_with_next_level() == {"foo.bar.baz"}
    assert data.complete_metric_names_at_base_level() == {"foo.bar.baz"}
    assert data.record("foo.bar.baz") == DocCountRecord(2, 1)


def test_equal_counts_mean_prefix_only() -> None:
    data = MetricIndexData(3)
    data.add("foo.bar.baz", 1)
    data.add("foo.bar.baz.aux", 1)

    assert data.complete_metric_names_at_base_level() == frozenset()
    assert data.metric_names_with_next_level() == {"foo.bar.baz"}


def test_parent_inferred_from_child_only_is_not_complete() -> None:
    data = MetricIndexData(3)
    data.add("foo.bar.baz.aux", 1)

    assert data.record("foo.bar.baz") == DocCountRecord(0, 1)
    assert data.complete_metric_names_at_base_level() == frozenset()
    assert data.metric_names_with_next_level() == {"foo.bar.baz"}


def test_root_level_uses_first_segment_as_parent() -> None:
    data = MetricIndexData(0)
    data.add("foo", 3)
    data.add("foo.bar", 2)

    assert data.metric_names_with_next_level() == {"foo"}
    assert data.complete_metric_names_at_base_level() == {"foo"}


def test_indexes_two_levels_below_are_ignored() -> None:
    data = MetricIndexData(2)
    data.add("x.y.z.w", 5)

    assert data.metric_names_with_next_level() == frozenset()
    assert data.complete_metric_names_at_base_level() == frozenset()
    assert len(data) == 0


def test_next_level_parent_is_base_level_string() -> None:
    data = MetricIndexData(2)
    data.add("foo.bar.baz", 2)
    data.add("foo.bar.baz.aux", 1)

    assert data.metric_names_with_next_level() == {"foo.bar"}
    assert data.complete_metric_names_at_base_level() == frozenset()


def test_actual_doc_count_is_overwritten() -> None:
    data = MetricIndexData(2)
    data.add("foo.bar", 4)
    data.add("foo.bar", 1)

    assert data.record("foo.bar").actual_doc_count == 1


def test_children_doc_counts_accumulate() -> None:
    data = MetricIndexData(2)
    data.add("foo.bar.a", 3)
    data.add("foo.bar.b", 4)
    data.add("foo.bar", 7)

    assert data.record("foo.bar").children_total_doc_count == 7
    assert data.complete_metric_names_at_base_level() == frozenset()

    data.add("foo.bar", 8)
    assert data.complete_metric_names_at_base_level() == {"foo.bar"}


def test_zero_actual_count_is_never_complete() -> None:
    data = MetricIndexData(1)
    data.add("foo", 0)

    assert data.complete_metric_names_at_base_level() == frozenset()


def test_results_are_immutable_snapshots() -> None:
    data = MetricIndexData(1)
    data.add("foo", 2)
    data.add("foo.bar", 1)

    names = data.metric_names_with_next_level()
    complete = data.complete_metric_names_at_base_level()
    assert isinstance(names, frozenset)
    assert isinstance(complete, frozenset)

    data.add("baz.qux", 1)
    assert names == {"foo"}
    assert data.metric_names_with_next_level() == {"foo", "baz"}


def test_negative_base_level_rejected() -> None:
    with pytest.raises(ValueError):
        MetricIndexData(-1)


@pytest.mark.parametrize(
    ("index", "doc_count"),
    [
        ("", 1),
        (None, 1),
        ("foo.bar", -1),
        ("foo.bar", True),
        ("foo.bar", 2.0),
        ("foo.bar", "3"),
    ],
)
def test_invalid_observations_rejected(index: str, doc_count: int) -> None:
    data = MetricIndexData(2)
    data.add("foo.bar", 3)

    with pytest.raises(ValueError):
        data.add(index, doc_count)

    assert data.record("foo.bar") == DocCountRecord(3, 0)
    assert len(data) == 1


@pytest.mark.parametrize("doc_count", [True, 2.0, "3"])
def test_buckets_require_integer_doc_counts(doc_count: object) -> None:
    with pytest.raises(ValueError):
        AggregationBucket(key="foo.bar", doc_count=doc_count)


def test_add_all_accepts_pairs_and_observations() -> None:
    data = MetricIndexData(2)
    data.add_all([("foo.bar", 2), IndexObservation(index="foo.bar.baz", doc_count=1)])

    assert data.complete_metric_names_at_base_level() == {"foo.bar"}
    assert data.metric_names_with_next_level() == {"foo.bar"}


def test_from_buckets() -> None:
    buckets = [
        AggregationBucket(key="foo.bar", doc_count=1),
        AggregationBucket(key="foo.bar.baz", doc_count=1),
        AggregationBucket(key="foo.qux", doc_count=1),
    ]
    data = MetricIndexData.from_buckets(2, buckets)

    assert data.metric_names_with_next_level() == {"foo.bar"}
    assert data.complete_metric_names_at_base_level() == {"foo.qux"}


segments = st.sampled_from(["a", "b", "c"])
indexes = st.lists(segments, min_size=1, max_size=5).map(".".join)
observations = st.lists(st.tuples(indexes, st.integers(min_value=0, max_value=20)), max_size=30)


def _classify(base_level: int, items: list[tuple[str, int]]) -> tuple[frozenset, frozenset]:
    data = MetricIndexData(base_level)
    data.add_all(items)
    return data.metric_names_with_next_level(), data.complete_metric_names_at_base_level()


@settings(max_examples=200)
@given(base_level=st.integers(min_value=0, max_value=4), data=st.data())
def test_order_independence(base_level: int, data: st.DataObject) -> None:
    # Repeated exact base-level keys would make the last write order-dependent.
    items = data.draw(observations.map(lambda obs: list({k: v for k, v in obs}.items())))
    shuffled = data.draw(st.permutations(items))

    assert _classify(base_level, items) == _classify(base_level, list(shuffled))


@settings(max_examples=200)
@given(
    base_level=st.integers(min_value=0, max_value=3),
    items=observations,
    noise=observations,
)
def test_irrelevant_depths_never_change_results(
    base_level: int, items: list[tuple[str, int]], noise: list[tuple[str, int]]
) -> None:
    depth = reference_depth(base_level)
    relevant = [(k, v) for k, v in items if len(k.split(".")) in (depth, depth + 1)]
    irrelevant = [(k, v) for k, v in noise if len(k.split(".")) not in (depth, depth + 1)]

    assert _classify(base_level, relevant) == _classify(base_level, relevant + irrelevant)
    assert _classify(base_level, relevant) == _classify(base_level, irrelevant + relevant)


@given(items=observations)
def test_completeness_threshold(items: list[tuple[str, int]]) -> None:
    data = MetricIndexData(2)
    data.add_all(items)
    complete = data.complete_metric_names_at_base_level()

    for index, _ in items:
        name = ".".join(index.split(".")[:2])
        record = data.record(name)
        expected = (
            record.actual_doc_count > 0
            and record.actual_doc_count > record.children_total_doc_count
        )
        assert (name in complete) == expected
