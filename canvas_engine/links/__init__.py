"""Component links and link groups.

Example usage:
    >>> from canvas_engine.links import add_link, groups_of
    >>> links = add_link([], "c1", "c2", ["c1", "c2", "c3"])
    >>> groups_of(["c1", "c2", "c3"], links)["c3"]
    frozenset({'c3'})
"""

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

__all__ = [
    "UnionFind",
    "LinkIssue",
    "check_link",
    "add_link",
    "remove_link",
    "purge_links",
    "groups_of",
    "linked_groups",
    "are_linked",
]
