"""Tests for component links and link grouping."""

import pytest

from canvas_engine.schema import ComponentLink

from .lib import (
    LinkIssue,
    UnionFind,
    add_link,
    are_linked,
    check_link,
    groups_of,
    linked_groups,
    purge_links,
    remove_link,
)

IDS = ["c1", "c2", "c3", "c4"]


def pair(a: str, b: str) -> ComponentLink:
    return ComponentLink(a=a, b=b)


class TestUnionFind:
    """Tests for the disjoint-set forest."""

    @pytest.mark.unit
    def test_singletons(self):
        forest = UnionFind(["a", "b"])
        assert not forest.connected("a", "b")
        assert forest.members("a") == frozenset({"a"})
        assert len(forest) == 2

    @pytest.mark.unit
    def test_transitive_union(self):
        forest = UnionFind(["a", "b", "c", "d"])
        forest.union("a", "b")
        forest.union("c", "b")
        assert forest.connected("a", "c")
        assert not forest.connected("a", "d")
        assert forest.groups() == [frozenset({"a", "b", "c"}), frozenset({"d"})]

    @pytest.mark.unit
    def test_union_is_idempotent(self):
        forest = UnionFind(["a", "b"])
        root = forest.union("a", "b")
        assert forest.union("b", "a") == root

    @pytest.mark.unit
    def test_unknown_item(self):
        with pytest.raises(KeyError):
            UnionFind().find("ghost")

    @pytest.mark.unit
    def test_long_chain_compresses(self):
        items = [f"n{i}" for i in range(200)]
        forest = UnionFind(items)
        for left, right in zip(items, items[1:]):
            forest.union(left, right)
        assert forest.members("n0") == frozenset(items)


class TestAddLink:
    """Tests for add_link replace-on-add behavior."""

    @pytest.mark.unit
    def test_adds_pair(self):
        assert add_link([], "c1", "c2", IDS) == [pair("c1", "c2")]

    @pytest.mark.unit
    def test_replaces_prior_link(self):
        """Linking c2 to c3 drops the c1-c2 link."""
        links = add_link([pair("c1", "c2")], "c2", "c3", IDS)
        assert links == [pair("c2", "c3")]
        groups = groups_of(IDS, links)
        assert groups["c2"] == frozenset({"c2", "c3"})
        assert groups["c1"] == frozenset({"c1"})

    @pytest.mark.unit
    def test_replaces_links_of_both_endpoints(self):
        links = [pair("c1", "c2"), pair("c3", "c4")]
        assert add_link(links, "c2", "c3", IDS) == [pair("c2", "c3")]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "a, b, issue",
        [
            ("c1", "c1", LinkIssue.SELF_LINK),
            ("c1", "c9", LinkIssue.UNKNOWN_ENDPOINT),
            ("c2", "c1", LinkIssue.DUPLICATE),
        ],
    )
    def test_invalid_gestures_are_no_ops(self, a, b, issue):
        """Invalid gestures return the links unchanged."""
        links = [pair("c1", "c2")]
        assert check_link(links, a, b, IDS) == issue
        result = add_link(links, a, b, IDS)
        assert result == links
        assert result is not links

    @pytest.mark.unit
    def test_link_between_unknown_ids_is_ignored(self):
        """Endpoints missing from the live id set never produce a link."""
        assert check_link([], "ghost1", "ghost2", IDS) == LinkIssue.UNKNOWN_ENDPOINT
        assert add_link([], "ghost1", "ghost2", IDS) == []
        assert add_link([], "ghost1", "ghost2", []) == []

    @pytest.mark.unit
    def test_input_not_mutated(self):
        links = [pair("c1", "c2")]
        add_link(links, "c2", "c3", IDS)
        assert links == [pair("c1", "c2")]

    @pytest.mark.unit
    def test_at_most_one_link_per_component(self):
        """No sequence of adds gives a component two links."""
        links: list[ComponentLink] = []
        for a, b in [("c1", "c2"), ("c3", "c4"), ("c2", "c3"), ("c4", "c1")]:
            links = add_link(links, a, b, IDS)
            for component_id in IDS:
                assert sum(link.touches(component_id) for link in links) <= 1


class TestRemoveAndPurge:
    """Tests for remove_link and purge_links."""

    @pytest.mark.unit
    def test_remove_is_unordered(self):
        assert remove_link([pair("c1", "c2")], "c2", "c1") == []

    @pytest.mark.unit
    def test_remove_missing_is_no_op(self):
        assert remove_link([pair("c1", "c2")], "c1", "c3") == [pair("c1", "c2")]

    @pytest.mark.unit
    def test_purge(self):
        links = [pair("c1", "c2"), pair("c3", "c4")]
        assert purge_links(links, "c2") == [pair("c3", "c4")]


class TestGroups:
    """Tests for group queries."""

    @pytest.mark.unit
    def test_groups_of_general_graph(self):
        """Chains group transitively."""
        # Chains can exist in data built outside add_link.
        links = [pair("c1", "c2"), pair("c2", "c3")]
        groups = groups_of(IDS, links)
        assert groups["c1"] == groups["c3"] == frozenset({"c1", "c2", "c3"})
        assert groups["c4"] == frozenset({"c4"})

    @pytest.mark.unit
    def test_dangling_links_ignored(self):
        groups = groups_of(["c1"], [pair("c1", "gone")])
        assert groups == {"c1": frozenset({"c1"})}

    @pytest.mark.unit
    def test_linked_groups(self):
        links = [pair("c3", "c4"), pair("c1", "c2")]
        assert linked_groups(links) == [frozenset({"c3", "c4"}), frozenset({"c1", "c2"})]

    @pytest.mark.unit
    def test_are_linked(self):
        links = [pair("c1", "c2")]
        assert are_linked("c1", "c2", links)
        assert not are_linked("c1", "c3", links)
        assert are_linked("c3", "c3", links)
