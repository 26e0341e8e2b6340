"""Graph model shared by every fetcher.

Nodes and relations are immutable values; :class:`Graph` is the only
mutable piece and serializes every write behind a lock so workers running
on different threads can feed it at the same time.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Mapping


class ResourceKind(str, Enum):
    USER = "user"
    GROUP = "group"
    ROLE = "role"
    POLICY = "policy"
    BUCKET = "bucket"
    STORAGE_OBJECT = "storageobject"

    @classmethod
    def values(cls) -> list[str]:
        return [k.value for k in cls]


@dataclass(frozen=True)
class RawItem:
    """One item as returned by a listing call, tagged with its kind."""

    kind: ResourceKind
    data: Mapping[str, Any]


@dataclass(frozen=True)
class Node:
    kind: ResourceKind
    id: str
    properties: Mapping[str, Any] = field(default_factory=dict)

    def with_properties(self, **extra: Any) -> "Node":
        """Return a copy carrying ``extra`` on top of the current properties."""
        merged = dict(self.properties)
        merged.update(extra)
        return replace(self, properties=merged)

    def ref(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "id": self.id}

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "id": self.id, "properties": dict(self.properties)}


@dataclass(frozen=True)
class Relation:
    """Parent contains child (a bucket contains an object)."""

    parent: Node
    child: Node

    def to_dict(self) -> Dict[str, Any]:
        return {"parent": self.parent.ref(), "child": self.child.ref()}


class Graph:
    """Thread-safe accumulator of nodes and parent/child relations.

    No deduplication happens here: adding the same node twice stores it
    twice. Relations hold their endpoints directly, so a parent does not
    need to be part of this graph to be linked.
    """

    def __init__(self) -> None:
        self._nodes: List[Node] = []
        self._relations: List[Relation] = []
        self._lock = threading.Lock()

    def add_node(self, node: Node) -> None:
        with self._lock:
            self._nodes.append(node)

    def add_relation(self, parent: Node, child: Node) -> None:
        with self._lock:
            self._relations.append(Relation(parent=parent, child=child))

    @property
    def nodes(self) -> List[Node]:
        """Snapshot of the nodes added so far."""
        with self._lock:
            return list(self._nodes)

    @property
    def relations(self) -> List[Relation]:
        """Snapshot of the relations added so far."""
        with self._lock:
            return list(self._relations)

    def find(self, kind: ResourceKind, node_id: str) -> List[Node]:
        with self._lock:
            return [n for n in self._nodes if n.kind == kind and n.id == node_id]

    def children_of(self, parent: Node) -> List[Node]:
        with self._lock:
            return [r.child for r in self._relations if r.parent == parent]

    def __len__(self) -> int:
        with self._lock:
            return len(self._nodes)

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "nodes": [n.to_dict() for n in self._nodes],
                "relations": [r.to_dict() for r in self._relations],
            }
