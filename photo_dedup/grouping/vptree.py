#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Vantage-point tree for radius queries in a metric space.

The tree is built once over a fixed list of items and a distance function that
must be a true metric (symmetric, non-negative, triangle inequality). Nodes live
in a flat arena and refer to their children and to their items by index.
"""

import random
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

DistanceFunc = Callable[[T, T], int]


@dataclass
class _Node:
    index: int
    threshold: Optional[int] = None
    left: Optional[int] = None
    right: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


class VPTree(Generic[T]):
    """Metric index answering "everything closer than r to q"."""

    def __init__(self, items: Sequence[T], distance: DistanceFunc,
                 seed: Optional[int] = None):
        # Construction permutes the list, so the tree owns a private copy
        self._items: List[T] = list(items)
        self._distance = distance
        self._rand = random.Random(seed)
        self._nodes: List[_Node] = []
        self._root = self._build(0, len(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def search_within(self, query: T, max_distance: int) -> List[Tuple[T, int]]:
        """All indexed items whose distance to query is strictly less than max_distance."""
        hits: List[Tuple[int, int]] = []
        self._search(self._root, query, max_distance, hits)
        return [(self._items[index], dist) for index, dist in hits]

    def _build(self, lo: int, hi: int) -> Optional[int]:
        if hi == lo:
            return None

        node_id = len(self._nodes)
        node = _Node(index=lo)
        self._nodes.append(node)

        if hi - lo > 1:
            self._swap(lo, self._rand.randrange(lo + 1, hi))
            mid = (lo + hi) // 2
            self._select(lo, lo + 1, mid, hi)
            node.threshold = self._distance(self._items[lo], self._items[mid])
            node.left = self._build(lo + 1, mid)
            node.right = self._build(mid, hi)

        return node_id

    def _select(self, vantage: int, lo: int, nth: int, hi: int) -> None:
        """Partially order items[lo:hi] by distance to the vantage point.

        Afterwards items[nth] holds the element that would sit there in sorted
        order, nothing before it is farther and nothing after it is closer.
        """
        items = self._items
        vp = items[vantage]
        dists = {i: self._distance(vp, items[i]) for i in range(lo, hi)}

        def swap(a: int, b: int) -> None:
            items[a], items[b] = items[b], items[a]
            dists[a], dists[b] = dists[b], dists[a]

        while hi - lo > 1:
            pivot = dists[(lo + hi) // 2]
            # Three-way partition: [lo, lt) < pivot, [lt, i) == pivot, [gt, hi) > pivot
            lt, i, gt = lo, lo, hi
            while i < gt:
                if dists[i] < pivot:
                    swap(lt, i)
                    lt += 1
                    i += 1
                elif dists[i] > pivot:
                    gt -= 1
                    swap(i, gt)
                else:
                    i += 1
            if nth < lt:
                hi = lt
            elif nth >= gt:
                lo = gt
            else:
                return

    def _search(self, node_id: Optional[int], query: T, max_distance: int,
                hits: List[Tuple[int, int]]) -> None:
        if node_id is None:
            return

        node = self._nodes[node_id]
        dist = self._distance(self._items[node.index], query)
        if dist < max_distance:
            hits.append((node.index, dist))

        if node.is_leaf:
            return

        if dist - max_distance <= node.threshold:
            self._search(node.left, query, max_distance, hits)
        if dist + max_distance >= node.threshold:
            self._search(node.right, query, max_distance, hits)

    def _swap(self, a: int, b: int) -> None:
        self._items[a], self._items[b] = self._items[b], self._items[a]
