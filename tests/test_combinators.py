import math
import pytest
from lazy import Seq


class TestMapFilter:
    """Test map, filter and reject"""

    def test_map(self):
        assert Seq.range(1, 4).map(lambda x: x * 2).collect() == [2, 4, 6]

    def test_filter(self):
        result = Seq.range(1, 10).filter(lambda x: x % 2 == 0).collect()
        assert result == [2, 4, 6, 8], f"Unexpected result: {result}"

    def test_reject(self):
        result = Seq.range(1, 10).reject(lambda x: x % 2 == 0).collect()
        assert result == [1, 3, 5, 7, 9], f"Unexpected result: {result}"

    def test_filtered_elements_do_not_count_toward_take(self):
        result = Seq.range(0, math.inf).filter(lambda x: x % 3 == 0).take(4).collect()
        assert result == [0, 3, 6, 9], f"Unexpected result: {result}"


class TestTakeSkip:
    """Test bounding combinators"""

    def test_take_more_than_available(self):
        assert Seq.from_array([1, 2]).take(5).collect() == [1, 2]

    def test_take_zero_pulls_nothing(self, pull_log):
        result = Seq.from_array([1, 2, 3]).inspect(pull_log.append).take(0).collect()
        assert result == []
        assert pull_log == [], f"take(0) should not pull: {pull_log}"

    def test_take_does_not_drain_parent(self, pull_log):
        Seq.range(0, 100).inspect(pull_log.append).take(3).collect()
        assert pull_log == [0, 1, 2], f"take() pulled past its bound: {pull_log}"

    def test_skip(self):
        assert Seq.range(0, 6).skip(4).collect() == [4, 5]

    def test_skip_past_end(self):
        assert Seq.range(0, 3).skip(10).collect() == []


class TestWindows:
    """Test pairwise and enumerate"""

    def test_pairwise_overlap(self):
        result = Seq.from_array([0, 1, 2, 3, 4]).pairwise().collect()
        assert result == [[0, 1], [1, 2], [2, 3], [3, 4]], f"Unexpected result: {result}"

    @pytest.mark.parametrize("items", [[], [42]])
    def test_pairwise_short_sources(self, items):
        assert Seq.from_array(items).pairwise().collect() == []

    def test_pairwise_pairs_are_independent(self):
        pairs = Seq.from_array([0, 1, 2]).pairwise().collect()
        pairs[0][1] = "changed"
        assert pairs[1] == [1, 2], "Mutating one pair must not affect the next"

    def test_pairwise_snapshots_do_not_share_elements(self):
        """Mutating an element inside one pair leaves the neighbouring pair untouched"""
        def mark_second(pair):
            pair[1].append("x")
            return pair

        result = Seq.from_array([[0], [1], [2]]).pairwise().map(mark_second).collect()
        assert result[0] == [[0], [1, "x"]], f"Unexpected first pair: {result[0]}"
        assert result[1][0] == [1], f"Second pair aliases the first: {result[1]}"

    def test_pairwise_does_not_mutate_source(self):
        source = [[0], [1]]
        pairs = Seq.from_array(source).pairwise().collect()
        pairs[0][0].append("x")
        assert source == [[0], [1]], f"Source changed through a pair: {source}"

    def test_pairwise_on_unbounded_source(self):
        result = Seq.range(0, math.inf).pairwise().take(2).collect()
        assert result == [[0, 1], [1, 2]]

    def test_enumerate(self):
        result = Seq.from_iterable("abc").enumerate().collect()
        assert result == [[0, "a"], [1, "b"], [2, "c"]], f"Unexpected result: {result}"

    def test_enumerate_counts_after_upstream_filter(self):
        result = Seq.range(0, 10).filter(lambda x: x > 6).enumerate().collect()
        assert result == [[0, 7], [1, 8], [2, 9]], f"Unexpected result: {result}"


class TestScanInspect:
    """Test scan and inspect"""

    def test_scan_accumulation(self):
        result = Seq.from_array([1, 2, 3]).scan(lambda a, b: a + b, 10).collect()
        assert result == [11, 13, 16], f"Unexpected result: {result}"

    def test_scan_never_yields_bare_initial(self):
        assert Seq.from_array([]).scan(lambda a, b: a + b, 10).collect() == []

    def test_scan_is_fresh_per_traversal(self):
        running = Seq.from_array([1, 1, 1]).scan(lambda a, b: a + b, 0)
        assert running.collect() == [1, 2, 3]
        assert running.collect() == [1, 2, 3], "Accumulator must restart on every traversal"

    def test_inspect_passes_elements_through(self, pull_log):
        result = Seq.from_array([1, 2, 3]).inspect(pull_log.append).map(lambda x: x * 2).collect()
        assert result == [2, 4, 6]
        assert pull_log == [1, 2, 3]

    def test_inspect_return_value_ignored(self):
        assert Seq.from_array([1, 2]).inspect(lambda x: "ignored").collect() == [1, 2]


class TestPartition:
    """Test partition into two independent sequences"""

    def test_partition_splits_by_predicate(self):
        evens, odds = Seq.range(1, 10).partition(lambda x: x % 2 == 0)
        assert evens.collect() == [2, 4, 6, 8]
        assert odds.collect() == [1, 3, 5, 7, 9]

    @pytest.mark.parametrize("source,pred", [
        ([5, 3, 8, 1, 9, 2], lambda x: x > 4),
        (["a", "bb", "", "ccc"], lambda s: len(s) % 2 == 1),
        ([], lambda x: True),
        ([1, 2, 3], lambda x: False),
    ])
    def test_partition_complement(self, source, pred):
        """Every element lands in exactly one half, order preserved within each"""
        matching, rest = Seq.from_array(source).partition(pred)
        matching_items = matching.collect()
        rest_items = rest.collect()

        assert matching_items == [x for x in source if pred(x)]
        assert rest_items == [x for x in source if not pred(x)]
        assert sorted(map(str, matching_items + rest_items)) == sorted(map(str, source))

    def test_partition_reruns_upstream_side_effects(self, pull_log):
        matching, rest = Seq.from_array([1, 2, 3]).inspect(pull_log.append).partition(lambda x: x > 1)
        assert pull_log == []

        matching.collect()
        rest.collect()
        assert pull_log == [1, 2, 3, 1, 2, 3], f"Each half should traverse the source: {pull_log}"

    def test_partition_halves_are_lazy(self):
        matching, rest = Seq.range(0, math.inf).partition(lambda x: x % 2 == 0)
        assert matching.take(3).collect() == [0, 2, 4]
        assert rest.take(3).collect() == [1, 3, 5]


class TestBatching:
    """Test batch and chunk"""

    def test_batch(self):
        result = Seq.range(1, 8).batch(3).collect()
        assert result == [(1, 2, 3), (4, 5, 6), (7,)], f"Unexpected result: {result}"

    def test_chunk_alias(self):
        assert Seq.range(0, 4).chunk(2).collect() == [(0, 1), (2, 3)]

    def test_batch_with_take_limits_pulls(self, pull_log):
        result = Seq.range(1, 12).inspect(pull_log.append).batch(4).take(2).collect()
        assert result == [(1, 2, 3, 4), (5, 6, 7, 8)]
        assert pull_log == [1, 2, 3, 4, 5, 6, 7, 8], "Only the first two batches should be computed"

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            Seq.range(0, 3).batch(0)
