"""
Parse tree node definitions for the state DSL.

A parse tree is built from four closed node variants:

- SingletonNode: a leaf state with no children
- EnumNode: a branch whose children are mutually exclusive sub-states
- ListNode: a branch whose children co-exist independently
- CommentNode: a ``//`` comment, ignored by every later stage
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class NodeKind(str, Enum):
    """Discriminator for parse node variants."""

    SINGLETON = "singleton"
    ENUM = "enum"
    LIST = "list"
    COMMENT = "comment"


class SingletonNode(BaseModel):
    """
    A leaf state.

    Examples:
        - ``Loading``: SingletonNode(name="Loading")
    """

    kind: Literal[NodeKind.SINGLETON] = NodeKind.SINGLETON
    name: str

    model_config = ConfigDict(frozen=True)


class EnumNode(BaseModel):
    """
    A state with mutually exclusive sub-states.

    Examples:
        - ``Menu { Main Options }``: EnumNode(name="Menu", children=[Main, Options])
        - ``Menu {}``: EnumNode(name="Menu", children=[])
    """

    kind: Literal[NodeKind.ENUM] = NodeKind.ENUM
    name: str
    children: list[ParseNode] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class ListNode(BaseModel):
    """
    A grouping of independent, co-existing sub-states.

    Examples:
        - ``Playing [ Player Environment ]``
    """

    kind: Literal[NodeKind.LIST] = NodeKind.LIST
    name: str
    children: list[ParseNode] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class CommentNode(BaseModel):
    """A ``//`` comment; ``text`` is trimmed."""

    kind: Literal[NodeKind.COMMENT] = NodeKind.COMMENT
    text: str

    model_config = ConfigDict(frozen=True)


ParseNode = SingletonNode | EnumNode | ListNode | CommentNode

EnumNode.model_rebuild()
ListNode.model_rebuild()


def node_children(node: ParseNode) -> list[ParseNode]:
    """Return the direct children of a node (empty for leaves and comments)."""
    if isinstance(node, EnumNode | ListNode):
        return node.children
    return []


def _walk(node: ParseNode) -> Iterator[ParseNode]:
    """Yield every node of the tree, depth-first, without recursion."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(node_children(current)))


def tree_size(node: ParseNode) -> int:
    """Count every node in the tree, comments included."""
    return sum(1 for _ in _walk(node))


def state_count(node: ParseNode) -> int:
    """Count the non-comment nodes in the tree."""
    return sum(1 for n in _walk(node) if not isinstance(n, CommentNode))
