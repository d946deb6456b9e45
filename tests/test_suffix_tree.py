"""Tests for the public build/search/tandem-repeat interface."""

import numpy as np
import pytest
from loguru import logger

import tandem_suffix_package.suffix_tree as suffix_tree_module
from tandem_suffix_package import (
    AllocationFailure,
    InputTooLarge,
    InvalidSentinel,
    PatternEmpty,
    PatternTooLarge,
    SuffixTree,
    SuffixTreeConfig,
    TreeStateError,
    build,
)
from tandem_suffix_package.python_backend.online_suffix import SuffixTreeBuilder

SAMPLE = "AABAACAADAABAAABAA"


def brute_force_occurrences(text, pattern):
    return [i for i in range(len(text) - len(pattern) + 1) if text[i:i + len(pattern)] == pattern]


@pytest.fixture
def captured_logs():
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)


class TestBuild:
    """Construction-time validation."""

    def test_returns_suffix_tree(self):
        assert isinstance(build(SAMPLE), SuffixTree)

    def test_text_is_kept_without_sentinel(self):
        assert build(SAMPLE).text == SAMPLE.encode()

    def test_too_large_input_rejected(self):
        with pytest.raises(InputTooLarge):
            build("A" * 11, max_length=10)

    def test_explicit_max_length_overrides_config(self):
        tree = build("A" * 20, max_length=20, config=SuffixTreeConfig(max_text_length=5))
        assert len(tree) == 21

    def test_sentinel_in_text_rejected(self):
        with pytest.raises(InvalidSentinel):
            build("AB$A")

    def test_validation_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            build("AB$A")

    def test_non_text_input_rejected(self):
        with pytest.raises(TypeError):
            build(12345)

    def test_rejection_is_logged(self, captured_logs):
        with pytest.raises(InputTooLarge):
            build("A" * 11, max_length=10)
        assert any(record["level"].name == "WARNING" for record in captured_logs)

    def test_construction_is_logged_at_debug(self, captured_logs):
        build(SAMPLE)
        assert any("Built suffix tree" in record["message"] for record in captured_logs)

    def test_memory_error_becomes_allocation_failure(self, monkeypatch):
        def exhausted(_text):
            raise MemoryError

        monkeypatch.setattr(suffix_tree_module, "build_tree", exhausted)
        with pytest.raises(AllocationFailure):
            build(SAMPLE)

    def test_allocation_failure_mid_build_releases_store(self, monkeypatch):
        """The chained error does not keep a live partial tree around."""
        stores = []
        real_extend = SuffixTreeBuilder.extend

        def extend_until_exhausted(builder, pos):
            stores.append(builder.store)
            if pos == 50:
                raise MemoryError
            real_extend(builder, pos)

        monkeypatch.setattr(SuffixTreeBuilder, "extend", extend_until_exhausted)
        with pytest.raises(AllocationFailure) as excinfo:
            build("AB" * 100)
        assert isinstance(excinfo.value.__cause__, MemoryError) and stores[-1].released


class TestSearch:
    """search() agrees with a brute-force scan."""

    @pytest.mark.parametrize("pattern", ["AA", "AAB", "A", "B", "C", "D", "BAA", SAMPLE])
    def test_occurrences_match_brute_force(self, pattern):
        result = build(SAMPLE).search(pattern)
        assert sorted(result.occurrences) == brute_force_occurrences(SAMPLE, pattern)

    def test_count_equals_occurrence_total(self):
        result = build(SAMPLE).search("AA")
        assert result.count == len(brute_force_occurrences(SAMPLE, "AA"))

    def test_missing_pattern_is_not_found(self):
        result = build(SAMPLE).search("AAE")
        assert (result.found, result.occurrences, result.count) == (False, [], 0)

    def test_pattern_longer_than_text_never_matches(self):
        assert not build("ABAB").search("ABABA").found

    def test_match_ending_on_leaf_counts_once(self):
        """A pattern occurring once ends on a leaf edge."""
        result = build(SAMPLE).search("AAC")
        assert (result.count, result.occurrences) == (1, [3])

    def test_matching_is_case_sensitive(self):
        assert not build(SAMPLE).search("aa").found

    def test_bytes_and_str_patterns_agree(self):
        tree = build(SAMPLE)
        assert tree.search(b"AAB") == tree.search("AAB")

    def test_memory_error_while_collecting_becomes_allocation_failure(self, monkeypatch, captured_logs):
        """A query that runs out of memory aborts with a chained error logged at ERROR."""
        def exhausted(_store, _index):
            raise MemoryError

        tree = build(SAMPLE)
        monkeypatch.setattr(suffix_tree_module, "collect_occurrences", exhausted)
        with pytest.raises(AllocationFailure) as excinfo:
            tree.search("AA")
        assert isinstance(excinfo.value.__cause__, MemoryError)
        assert any(record["level"].name == "ERROR" for record in captured_logs)

    def test_empty_pattern_rejected(self):
        with pytest.raises(PatternEmpty):
            build(SAMPLE).search("")

    def test_pattern_limit_enforced(self):
        tree = build(SAMPLE, config=SuffixTreeConfig(max_pattern_length=3))
        with pytest.raises(PatternTooLarge):
            tree.search("AABA")

    def test_sentinel_in_pattern_never_matches(self):
        assert not build(SAMPLE).search("AA$").found

    def test_single_character_text(self):
        tree = build("A")
        assert (tree.count_leaves(), tree.search("A").occurrences) == (2, [0])

    def test_empty_text_has_single_leaf(self):
        tree = build("")
        assert (tree.count_leaves(), tree.search("A").found) == (1, False)

    def test_rebuilding_gives_same_results(self):
        first, second = build(SAMPLE), build(SAMPLE)
        for pattern in ["A", "AA", "AAB", "BAA", "D"]:
            assert sorted(first.search(pattern).occurrences) == sorted(second.search(pattern).occurrences)

    def test_contains_and_count(self):
        tree = build(SAMPLE)
        assert (tree.contains("CAAD"), tree.contains("CAAB"), tree.count("AA")) == \
            (True, False, len(brute_force_occurrences(SAMPLE, "AA")))


class TestCountMany:
    """Batch counting returns a numpy array in input order."""

    def test_counts_in_order(self):
        counts = build(SAMPLE).count_many(["A", "B", "E", "AAB"])
        assert counts.tolist() == [len(brute_force_occurrences(SAMPLE, p)) for p in ["A", "B", "E", "AAB"]]

    def test_returns_ndarray(self):
        assert isinstance(build(SAMPLE).count_many(["A"]), np.ndarray)

    def test_empty_batch(self):
        assert build(SAMPLE).count_many([]).size == 0


class TestTandemRepeats:
    """Tandem repeat spans from the tree's occurrences."""

    def test_static_helper(self):
        assert SuffixTree.tandem_repeats([5, 9, 13, 20], 4) == [(5, 13)]

    def test_back_to_back_copies(self):
        tree = build("ABABABXAB")
        result = tree.search("AB")
        assert tree.tandem_repeats(result.occurrences, 2) == [(0, 4)]

    def test_analyze_report(self):
        report = build("ABABABXAB").analyze("AB")
        assert (report.found, report.sorted_positions, report.tandem_repeats) == (True, [0, 2, 4, 7], [(0, 4)])

    def test_analyze_missing_pattern(self):
        report = build(SAMPLE).analyze("AAE")
        assert (report.found, report.sorted_positions, report.tandem_repeats) == (False, [], [])

    def test_analyze_matches_brute_force(self):
        report = build(SAMPLE).analyze("AABA")
        assert report.sorted_positions == brute_force_occurrences(SAMPLE, "AABA")


class TestInspection:
    """Leaf counts and the tree dump."""

    def test_one_leaf_per_suffix(self):
        assert build(SAMPLE).count_leaves() == len(SAMPLE) + 1

    def test_edges_depth_first(self):
        assert list(build("A").edges()) == [(1, b"$", 1), (1, b"A$", 0)]

    def test_render(self):
        assert build("A").render() == "Suffix Tree (Root):\n├── '$' [1]\n└── 'A$' [0]"

    def test_display_prints_render(self, capsys):
        tree = build("AB")
        tree.display()
        assert capsys.readouterr().out.strip() == tree.render()


class TestRelease:
    """Teardown drops the whole tree."""

    def test_context_manager_releases(self):
        with build(SAMPLE) as tree:
            assert tree.search("AA").found
        assert tree.released

    def test_queries_after_release_rejected(self):
        tree = build(SAMPLE)
        tree.release()
        with pytest.raises(TreeStateError):
            tree.search("AA")

    def test_release_is_idempotent(self):
        tree = build(SAMPLE)
        tree.release()
        tree.release()
        assert repr(tree) == "SuffixTree(released)"
