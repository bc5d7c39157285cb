"""
Name resolution for flattened state records.

Every record gets a resolved name that must be unique across the table,
since resolved names become type names in the generated source.
"""

from __future__ import annotations

import logging
from enum import Enum

from .errors import DuplicateNameError, InvariantError
from .flatten import NodeRecord, NodeType

logger = logging.getLogger(__name__)


class NamingScheme(str, Enum):
    """How resolved state names are derived from a state's ancestry."""

    # Names of all ancestors, root first, then the state's own name
    FULL = "full"
    # Immediate parent's name, then the state's own name
    SHORT = "short"
    # The state's own name (all names must be unique)
    NONE = "none"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: str) -> NamingScheme:
        """Accept ``Full``/``full``/``FULL`` and friends."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(scheme.label for scheme in cls)
            raise ValueError(
                f"Unknown naming scheme {value!r} (expected one of: {choices})"
            ) from None


class ListNaming(str, Enum):
    """Whether List states take part in ancestor-derived names."""

    # A List contributes its name like an Enum would
    INCLUSIVE = "inclusive"
    # A List is skipped when building names of its descendants
    TRANSPARENT = "transparent"


def _naming_ancestors(
    records: list[NodeRecord], record: NodeRecord, list_naming: ListNaming
) -> list[NodeRecord]:
    """Ancestors that contribute to names, nearest first."""
    ancestors = []
    current = record
    while current.parent is not None:
        current = records[current.parent]
        if list_naming == ListNaming.TRANSPARENT and current.node_type == NodeType.LIST:
            continue
        ancestors.append(current)
    return ancestors


def compute_name(
    records: list[NodeRecord],
    record: NodeRecord,
    naming_scheme: NamingScheme,
    list_naming: ListNaming = ListNaming.INCLUSIVE,
) -> str:
    """Compute the resolved name of one record without checking uniqueness."""
    if naming_scheme == NamingScheme.NONE:
        return record.name

    ancestors = _naming_ancestors(records, record, list_naming)
    if naming_scheme == NamingScheme.SHORT:
        ancestors = ancestors[:1]
    return "".join(a.name for a in reversed(ancestors)) + record.name


def apply_naming_scheme(
    records: list[NodeRecord],
    naming_scheme: NamingScheme,
    list_naming: ListNaming = ListNaming.INCLUSIVE,
) -> None:
    """
    Resolve the name of every record in place.

    Names are only assigned once the whole table resolved without
    collisions; on failure no record is modified.

    Args:
        records: Flattened table, parents before children
        naming_scheme: Naming policy
        list_naming: How List ancestors contribute to names

    Raises:
        DuplicateNameError: If two records resolve to the same name
        InvariantError: If a record was already resolved
    """
    seen: set[str] = set()
    resolved: list[str] = []

    for record in records:
        if record.resolved_name is not None:
            raise InvariantError(f"Record {record.name!r} was already resolved")
        name = compute_name(records, record, naming_scheme, list_naming)
        if name in seen:
            raise DuplicateNameError(resolved_name=name, original_name=record.name)
        seen.add(name)
        resolved.append(name)

    for record, name in zip(records, resolved, strict=True):
        record.resolved_name = name

    logger.debug("Resolved %d names with %s naming", len(resolved), naming_scheme.label)
