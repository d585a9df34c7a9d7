"""A tree of node ids with reusable slots."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field


@dataclass
class Graph:
    """Parent and child links between integer node ids.

    An unparented node is its own parent.
    """

    root: int = 0
    children: list = field(default_factory=list)
    parent: list = field(default_factory=list)
    _free_list: list = field(default_factory=list, init=False, repr=False)

    def alloc_node(self) -> int:
        """Allocate a node; it may be a previously freed id."""
        if self._free_list:
            return self._free_list.pop()
        node = len(self.children)
        self.children.append([])
        self.parent.append(node)
        return node

    def append_child(self, parent: int, child: int) -> None:
        self.children[parent].append(child)
        self.parent[child] = parent

    def add_before(self, parent: int, sibling: int, child: int) -> None:
        """Insert child into parent's children just before sibling."""
        siblings = self.children[parent]
        if sibling not in siblings:
            raise ValueError("tried add_before nonexistent sibling")
        siblings.insert(siblings.index(sibling), child)
        self.parent[child] = parent

    def remove_child(self, parent: int, child: int) -> None:
        """Detach child from parent, leaving it unparented."""
        siblings = self.children[parent]
        if child not in siblings:
            raise ValueError("tried to remove nonexistent child")
        siblings.remove(child)
        self.parent[child] = child

    def free_subtree(self, node: int) -> None:
        """Free a node and all its descendants, breadth first."""
        queue = deque([node])
        while queue:
            current = queue.popleft()
            self._free_list.append(current)
            self.parent[current] = current
            kids, self.children[current] = self.children[current], []
            queue.extend(kids)