"""Cross-breakpoint component links and their transitive groups.

Links are stored as unordered pairs with at most one link per component.
Groups are never stored; they are rebuilt from the current edge list with
a disjoint-set forest whenever they are asked for.
"""

import logging
from collections.abc import Iterable
from enum import Enum

from canvas_engine.schema import ComponentLink

logger = logging.getLogger(__name__)


class UnionFind:
    """Disjoint-set forest over string ids with path halving and union by rank."""

    def __init__(self, items: Iterable[str] = ()):
        self._parent: dict[str, str] = {}
        self._rank: dict[str, int] = {}
        for item in items:
            self.add(item)

    def __contains__(self, item: str) -> bool:
        return item in self._parent

    def __len__(self) -> int:
        return len(self._parent)

    def add(self, item: str) -> None:
        if item not in self._parent:
            self._parent[item] = item
            self._rank[item] = 0

    def find(self, item: str) -> str:
        """Return the representative of item's set.

        Raises:
            KeyError: If item was never added.
        """
        parent = self._parent
        if item not in parent:
            raise KeyError(item)
        while parent[item] != item:
            parent[item] = parent[parent[item]]
            item = parent[item]
        return item

    def union(self, a: str, b: str) -> str:
        """Merge the sets holding a and b and return the new representative."""
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return ra
        if self._rank[ra] < self._rank[rb]:
            ra, rb = rb, ra
        self._parent[rb] = ra
        if self._rank[ra] == self._rank[rb]:
            self._rank[ra] += 1
        return ra

    def connected(self, a: str, b: str) -> bool:
        return self.find(a) == self.find(b)

    def members(self, item: str) -> frozenset[str]:
        root = self.find(item)
        return frozenset(x for x in self._parent if self.find(x) == root)

    def groups(self) -> list[frozenset[str]]:
        """All sets, ordered by the first-added member of each."""
        by_root: dict[str, list[str]] = {}
        for item in self._parent:
            by_root.setdefault(self.find(item), []).append(item)
        return [frozenset(items) for items in by_root.values()]


class LinkIssue(str, Enum):
    """Why a link gesture was ignored."""

    SELF_LINK = "self_link"
    UNKNOWN_ENDPOINT = "unknown_endpoint"
    DUPLICATE = "duplicate"


def check_link(
    links: list[ComponentLink],
    a: str,
    b: str,
    component_ids: Iterable[str],
) -> LinkIssue | None:
    """Classify a proposed link, or return None if it may be added.

    Args:
        links: Current links.
        a: First endpoint.
        b: Second endpoint.
        component_ids: Live component ids. Endpoints outside this set are
            rejected.
    """
    if a == b:
        return LinkIssue.SELF_LINK
    known = set(component_ids)
    if a not in known or b not in known:
        return LinkIssue.UNKNOWN_ENDPOINT
    key = frozenset((a, b))
    if any(link.key == key for link in links):
        return LinkIssue.DUPLICATE
    return None


def add_link(
    links: list[ComponentLink],
    a: str,
    b: str,
    component_ids: Iterable[str],
) -> list[ComponentLink]:
    """Link a and b, replacing any link either of them already has.

    Invalid gestures (self-link, unknown endpoint, existing pair) leave the
    links unchanged.

    Returns:
        New list of links; the input list is not modified.
    """
    issue = check_link(links, a, b, component_ids)
    if issue is not None:
        logger.debug(f"Ignored link {a} <-> {b}: {issue.value}")
        return list(links)

    kept = [link for link in links if not link.touches(a) and not link.touches(b)]
    if len(kept) != len(links):
        logger.debug(f"Linking {a} <-> {b} replaced {len(links) - len(kept)} link(s)")
    kept.append(ComponentLink(a=a, b=b))
    return kept


def remove_link(links: list[ComponentLink], a: str, b: str) -> list[ComponentLink]:
    """Remove the unordered pair {a, b} if present."""
    key = frozenset((a, b))
    return [link for link in links if link.key != key]


def purge_links(links: list[ComponentLink], component_id: str) -> list[ComponentLink]:
    """Remove every link touching a component."""
    return [link for link in links if not link.touches(component_id)]


def groups_of(
    component_ids: Iterable[str], links: Iterable[ComponentLink]
) -> dict[str, frozenset[str]]:
    """Map every component id to the full set of components linked to it.

    Unlinked components map to a singleton. Links naming an id outside
    ``component_ids`` are ignored.

    Args:
        component_ids: All live component ids.
        links: Link edges.

    Returns:
        Dict of component id to its connected set.
    """
    forest = UnionFind(component_ids)
    for link in links:
        if link.a in forest and link.b in forest:
            forest.union(link.a, link.b)
        else:
            logger.debug("Skipping dangling link %s <-> %s", link.a, link.b)
    result: dict[str, frozenset[str]] = {}
    for group in forest.groups():
        for member in group:
            result[member] = group
    return result


def linked_groups(links: Iterable[ComponentLink]) -> list[frozenset[str]]:
    """Groups of two or more linked components, in first-seen order."""
    forest = UnionFind()
    for link in links:
        forest.add(link.a)
        forest.add(link.b)
        forest.union(link.a, link.b)
    return [group for group in forest.groups() if len(group) > 1]


def are_linked(a: str, b: str, links: Iterable[ComponentLink]) -> bool:
    """Whether a and b fall in the same link group."""
    if a == b:
        return True
    return any(a in group and b in group for group in linked_groups(links))
