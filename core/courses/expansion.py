"""Expand/collapse state for the course preview tree.

State is the set of expanded node ids. Modules and sections live in
different tables, so a node id carries its level: ("module", 3) and
("section", 3) are different nodes.
"""

from typing import Literal

from .types import Course

NodeId = tuple[Literal["module", "section"], int]


def module_node(module_id: int) -> NodeId:
    return ("module", module_id)


def section_node(section_id: int) -> NodeId:
    return ("section", section_id)


def toggle(node_id: NodeId, expanded: frozenset) -> frozenset:
    """Flip one node; toggling twice restores the original set."""
    return expanded ^ {node_id}


def expand_all(course: Course) -> frozenset:
    """Every module and section in the course (items have no collapse state)."""
    ids = set()
    for module in course.modules:
        ids.add(module_node(module.id))
        ids.update(section_node(s.id) for s in module.sections)
    return frozenset(ids)


def collapse_all() -> frozenset:
    return frozenset()
