"""Tests for value extraction and weighted ranked search."""

import copy
from dataclasses import dataclass

import pytest

from keyrank.search import KeySpec, SearchResult, get_value, iter_candidates, score_item, search

NAME = [KeySpec("name")]


@dataclass
class Node:
    name: str
    meta: dict


class TestKeySpec:
    """Test key spec construction and parsing."""

    def test_defaults(self):
        assert KeySpec("name").weight == 1

    @pytest.mark.parametrize("weight", [0, -1, -0.5, True, "2", float("nan"), float("inf")])
    def test_rejects_bad_weight(self, weight):
        with pytest.raises(ValueError):
            KeySpec("name", weight)

    def test_parse_path_only(self):
        assert KeySpec.parse("meta.title") == KeySpec("meta.title", 1)

    def test_parse_with_weight(self):
        assert KeySpec.parse("name:2") == KeySpec("name", 2.0)
        assert KeySpec.parse("a.b:0.5") == KeySpec("a.b", 0.5)

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            KeySpec.parse("name:0")
        with pytest.raises(ValueError):
            KeySpec.parse("name:nan")
        with pytest.raises(ValueError):
            KeySpec.parse("name:inf")

    def test_parse_colon_in_path(self):
        assert KeySpec.parse("ns:name") == KeySpec("ns:name", 1)
        assert KeySpec.parse("ns:name:3") == KeySpec("ns:name", 3)

    def test_from_dict(self):
        assert KeySpec.from_dict({"path": "name", "weight": 3}) == KeySpec("name", 3)
        assert KeySpec.from_dict({"key": "tags"}) == KeySpec("tags", 1)
        with pytest.raises(ValueError):
            KeySpec.from_dict({"weight": 3})


class TestGetValue:
    """Test field value extraction."""

    def test_scalar_passthrough(self):
        assert get_value("Node A", "name") == "Node A"
        assert get_value(5, "name") == 5
        assert get_value(None, "name") is None

    def test_direct_key(self):
        assert get_value({"name": "Node A"}, "name") == "Node A"

    def test_flat_dotted_key_wins(self):
        item = {"a.b": "flat", "a": {"b": "nested"}}
        assert get_value(item, "a.b") == "flat"

    def test_nested_path(self):
        assert get_value({"a": {"b": {"c": "deep"}}}, "a.b.c") == "deep"

    def test_missing_segment(self):
        assert get_value({"a": {"b": 1}}, "a.z.c") is None
        assert get_value({}, "name") is None
        assert get_value({"a": "text"}, "a.b") is None

    def test_sequence_index(self):
        assert get_value({"tags": ["x", "y"]}, "tags.1") == "y"
        assert get_value({"tags": ["x", "y"]}, "tags.5") is None

    def test_non_ascii_digit_segment(self):
        assert get_value({"a": ["x", "y"]}, "a.²") is None
        assert search("x", [{"a": ["x", "y"]}], [KeySpec("a.²")]) == []

    def test_attribute_lookup(self):
        node = Node("Node A", {"title": "Alpha"})
        assert get_value(node, "name") == "Node A"
        assert get_value(node, "meta.title") == "Alpha"
        assert get_value(node, "missing") is None

    def test_does_not_mutate(self):
        item = {"a": {"b": ["x", "y"]}, "c.d": 1}
        before = copy.deepcopy(item)
        get_value(item, "a.b.0")
        get_value(item, "c.d")
        get_value(item, "z.y")
        assert item == before


class TestIterCandidates:
    """Test expansion of items into weighted candidates."""

    def test_scalar_and_array(self):
        item = {"name": "Node", "tags": ["one", "", 3, "two"]}
        keys = [KeySpec("name", 2), KeySpec("tags")]
        assert list(iter_candidates(item, keys)) == [("Node", 2), ("one", 1), ("two", 1)]

    @pytest.mark.parametrize("value", [None, "", 5, {"x": "y"}])
    def test_skips_non_strings(self, value):
        assert list(iter_candidates({"name": value}, NAME)) == []


class TestSearch:
    """Test weighted ranked search."""

    def test_ranks_and_filters(self):
        items = [{"name": "Node A"}, {"name": "Other"}, {"name": "Sandbox"}]
        results = search("nd", items, NAME)
        assert results == [SearchResult(95, items[0]), SearchResult(75, items[2])]

    def test_results_share_items(self):
        items = [{"name": "Node A"}]
        results = search("nd", items, NAME)
        assert results[0].item is items[0]

    def test_higher_weight_dominates(self):
        item = {"title": "Node", "label": "Sandbox"}
        # title alone scores 105, label alone 75
        assert score_item("nd", item, [KeySpec("title", 1), KeySpec("label", 10)]) == 750
        assert score_item("nd", item, [KeySpec("title", 10), KeySpec("label", 1)]) == 1050

    def test_array_uses_best_element(self):
        items = [{"tags": ["other", "sandbox", "node"]}]
        results = search("nd", items, [KeySpec("tags")])
        assert [r.score for r in results] == [105]

    def test_unmatched_fields_skipped(self):
        items = [{"name": 5}, {"name": None}, {"name": ""}, {}, {"name": ["", None]}]
        assert search("nd", items, NAME) == []

    def test_empty_query(self):
        assert search("", [{"name": "Node"}], NAME) == []

    def test_scalar_items(self):
        results = search("nd", ["Other", "Sandbox", "Node A"], NAME)
        assert [r.item for r in results] == ["Node A", "Sandbox"]

    def test_ties_keep_input_order(self):
        items = [{"name": "node", "id": 1}, {"name": "node", "id": 2}, {"name": "node", "id": 3}]
        results = search("nd", items, NAME)
        assert [r.item["id"] for r in results] == [1, 2, 3]

    def test_idempotent(self):
        items = [{"name": "Node A"}, {"name": "Sandbox"}, {"name": "node_data"}]
        first = search("nd", items, NAME)
        second = search("nd", items, NAME)
        assert first == second

    def test_limit(self):
        items = [{"name": "Node A"}, {"name": "Other"}, {"name": "Sandbox"}]
        assert [r.item for r in search("nd", items, NAME, limit=1)] == [items[0]]

    def test_custom_getter(self):
        fields = {"a": {"label": "Node A"}, "b": {"label": "Sandbox"}}
        results = search("nd", ["b", "a"], [KeySpec("label")], getter=lambda item, path: fields[item][path])
        assert [r.item for r in results] == ["a", "b"]

    def test_does_not_mutate_items(self):
        items = [{"name": "Node A", "tags": ["x"]}, {"name": "Sandbox"}]
        before = copy.deepcopy(items)
        search("nd", items, [KeySpec("name"), KeySpec("tags")])
        assert items == before
