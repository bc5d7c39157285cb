"""
Flattening of a parse tree into an indexed table of node records.

The tree is walked breadth-first so that every record's parent appears
earlier in the table than the record itself. Ancestor chains can then be
followed by index without re-traversing the tree.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum

from pydantic import BaseModel, Field

from .errors import InvariantError
from .nodes import CommentNode, EnumNode, ListNode, ParseNode, node_children, state_count

logger = logging.getLogger(__name__)


class NodeType(str, Enum):
    """Kind of state a record was flattened from."""

    SINGLETON = "singleton"
    ENUM = "enum"
    LIST = "list"


class NodeRecord(BaseModel):
    """
    One flattened state.

    Attributes:
        index: Position in the table (breadth-first discovery order)
        parent: Index of the structural parent, None for roots
        depth: Distance from the record's tree root
        node_type: Singleton, Enum or List
        name: Original state name from the DSL
        resolved_name: Final type name, filled in once by the naming resolver
        variants: Names of the immediate children, in source order
    """

    index: int
    parent: int | None = None
    depth: int = 0
    node_type: NodeType = NodeType.SINGLETON
    name: str
    resolved_name: str | None = None
    variants: list[str] = Field(default_factory=list)


def _node_type(node: ParseNode) -> NodeType:
    if isinstance(node, EnumNode):
        return NodeType.ENUM
    if isinstance(node, ListNode):
        return NodeType.LIST
    return NodeType.SINGLETON


def flatten_parse_node(root: ParseNode) -> list[NodeRecord]:
    """
    Flatten a parse tree into node records.

    Comments produce no record.

    Args:
        root: Root of the parse tree

    Returns:
        Records in breadth-first order

    Raises:
        InvariantError: If the produced table breaks the ordering invariants
    """
    records: list[NodeRecord] = []
    todo: deque[tuple[ParseNode, int, int | None]] = deque([(root, 0, None)])

    while todo:
        node, depth, parent = todo.popleft()
        if isinstance(node, CommentNode):
            continue

        index = len(records)
        records.append(
            NodeRecord(
                index=index,
                parent=parent,
                depth=depth,
                node_type=_node_type(node),
                name=node.name,
            )
        )
        for child in node_children(node):
            todo.append((child, depth + 1, index))

    # Parents always precede their children, so variants can be filled in one pass
    for record in records:
        if record.parent is not None:
            records[record.parent].variants.append(record.name)

    check_record_invariants(records)
    expected = state_count(root)
    if len(records) != expected:
        raise InvariantError(f"Flattened {len(records)} records from a tree of {expected} states")

    logger.debug("Flattened %d records", len(records))
    return records


def check_record_invariants(records: list[NodeRecord]) -> None:
    """
    Verify table ordering invariants.

    Raises:
        InvariantError: If an index is out of place, a parent does not precede
            its child, or a child is not deeper than its parent
    """
    for i, record in enumerate(records):
        if record.index != i:
            raise InvariantError(f"Record {record.name!r} has index {record.index}, expected {i}")
        if record.parent is None:
            continue
        if not 0 <= record.parent < i:
            raise InvariantError(
                f"Record {record.name!r} at {i} has parent {record.parent} that does not precede it"
            )
        if record.depth <= records[record.parent].depth:
            raise InvariantError(
                f"Record {record.name!r} at depth {record.depth} is not deeper than its parent"
            )


def detach_implicit_root(records: list[NodeRecord]) -> list[NodeRecord]:
    """
    Drop the synthetic root record and re-index the rest.

    Children of the synthetic root become roots themselves.

    Args:
        records: Table whose first record is the synthetic root

    Returns:
        New table without the root
    """
    if not records:
        raise InvariantError("Cannot detach the root of an empty table")

    detached: list[NodeRecord] = []
    for record in records[1:]:
        if record.parent is None or record.depth == 0:
            raise InvariantError(f"Record {record.name!r} is a second root")
        parent = record.parent - 1 if record.parent > 0 else None
        detached.append(
            record.model_copy(
                update={
                    "index": record.index - 1,
                    "depth": record.depth - 1,
                    "parent": parent,
                    "variants": list(record.variants),
                }
            )
        )

    check_record_invariants(detached)
    return detached
