#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Disjoint-set union over the dense record ids of one run.
"""

from typing import Dict, List


class DisjointSetUnion:
    """Union-find with path compression. find(a) is always attached under find(b)."""

    def __init__(self, size: int):
        self._parent: List[int] = list(range(size))

    def __len__(self) -> int:
        return len(self._parent)

    def find(self, elem: int) -> int:
        parent = self._parent
        root = elem
        while parent[root] != root:
            root = parent[root]
        # Path compression
        while parent[elem] != root:
            parent[elem], elem = root, parent[elem]
        return root

    def union(self, a: int, b: int) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return
        self._parent[root_a] = root_b

    def as_groups(self, ignore_singletons: bool = False) -> List[List[int]]:
        """
        Members of every component, keyed by root in discovery order.

        With ignore_singletons, elements that are their own root are skipped
        while collecting, and each surviving root is appended to its own group
        afterwards. A root that nobody was attached to therefore vanishes.
        """
        groups: Dict[int, List[int]] = {}
        for elem in range(len(self._parent)):
            root = self.find(elem)
            if ignore_singletons and root == elem:
                continue
            groups.setdefault(root, []).append(elem)

        if ignore_singletons:
            for root, members in groups.items():
                members.append(root)

        return list(groups.values())
